import json
import logging
import pickle
from pathlib import Path
from typing import Dict, Union

import numpy as np

logger = logging.getLogger(__name__)

PICKLE_SUFFIXES = ['.pth', '.pt', '.pkl', '.pickle']


class ModelIO:
    """模型参数的保存和加载 - 状态字典为 {参数名: float}"""

    @staticmethod
    def save(state_dict: Dict[str, float], filepath: Union[str, Path]):
        """
        保存模型状态字典到文件

        Args:
            state_dict: 模型状态字典
            filepath: 保存路径, 按扩展名选择格式(.json / .npz / pickle)

        Examples:
            >>> ModelIO.save(model.state_dict(), 'model.json')
            >>> ModelIO.save(model.state_dict(), Path('models') / 'model.npz')
        """
        filepath = Path(filepath)

        # 确保目录存在
        filepath.parent.mkdir(parents=True, exist_ok=True)

        suffix = filepath.suffix.lower()
        if suffix == '.npz':
            ModelIO._save_npz(state_dict, filepath)
        elif suffix == '.json':
            ModelIO._save_json(state_dict, filepath)
        else:
            # 默认使用pickle格式
            ModelIO._save_pickle(state_dict, filepath)

        logger.info("模型已保存到: %s (%d 个参数)", filepath, len(state_dict))

    @staticmethod
    def load(filepath: Union[str, Path]) -> Dict[str, float]:
        """
        从文件加载模型状态字典

        Examples:
            >>> model.load_state_dict(ModelIO.load('model.json'))
        """
        filepath = Path(filepath)

        if not filepath.exists():
            raise FileNotFoundError(f"模型文件不存在: {filepath}")

        suffix = filepath.suffix.lower()
        if suffix == '.npz':
            state_dict = ModelIO._load_npz(filepath)
        elif suffix == '.json':
            state_dict = ModelIO._load_json(filepath)
        else:
            state_dict = ModelIO._load_pickle(filepath)

        logger.info("模型已从 %s 加载", filepath)
        return state_dict

    @staticmethod
    def _save_pickle(state_dict, filepath: Path):
        with open(filepath, 'wb') as f:
            pickle.dump({k: float(v) for k, v in state_dict.items()}, f,
                        protocol=pickle.HIGHEST_PROTOCOL)

    @staticmethod
    def _load_pickle(filepath: Path):
        with open(filepath, 'rb') as f:
            return {k: float(v) for k, v in pickle.load(f).items()}

    @staticmethod
    def _save_npz(state_dict, filepath: Path):
        """参数名和数值分两个数组保存, 参数名里的 '.' 不适合作为 npz 的键"""
        names = np.array(list(state_dict.keys()))
        values = np.array([float(v) for v in state_dict.values()], dtype=np.float64)
        np.savez_compressed(filepath, names=names, values=values)

    @staticmethod
    def _load_npz(filepath: Path):
        with np.load(filepath) as data:
            return {str(k): float(v) for k, v in zip(data['names'], data['values'])}

    @staticmethod
    def _save_json(state_dict, filepath: Path):
        with open(filepath, 'w', encoding='utf-8') as f:
            json.dump({k: float(v) for k, v in state_dict.items()}, f,
                      indent=2, ensure_ascii=False)

    @staticmethod
    def _load_json(filepath: Path):
        with open(filepath, 'r', encoding='utf-8') as f:
            return {k: float(v) for k, v in json.load(f).items()}


def save(model, filepath):
    """保存模块参数, 等价于 ModelIO.save(model.state_dict(), filepath)"""
    ModelIO.save(model.state_dict(), filepath)


def load(model, filepath, strict=True):
    """从文件加载参数到模块"""
    return model.load_state_dict(ModelIO.load(filepath), strict=strict)

"""
全局默认配置。

get_config() 返回一份深拷贝并合并调用方的覆盖项, 不会修改 CONFIG 本身。
"""

import copy

ACTIVATIONS = ['relu', 'tanh', 'sigmoid', 'linear']
WEIGHT_INITS = ['uniform', 'constant']

CONFIG = {
    'engine': {
        # 为 True 时允许在残留梯度上继续反向传播
        'allow_accumulation': False,
    },
    'init': {
        'weight_init': 'uniform',
        'init_value': 1.0,
        'bias_value': 0.0,
    },
    'model': {
        'activation': 'relu',
    },
    'training': {
        'lr': 1.0,
        'lr_min': 0.1,
        'decay_lr': True,
        'epochs': 100,
        'alpha': 1e-4,
        'batch_size': None,
    },
    'system': {
        'seed': 1337,
        'simple_logging': False,
    },
}


def _merge(base, overrides):
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(base.get(key), dict):
            _merge(base[key], value)
        else:
            base[key] = value
    return base


def get_config(overrides=None):
    """
    返回合并后的配置

    Args:
        overrides: 嵌套字典, 只需写出要修改的键, 例如 {'training': {'lr': 0.5}}

    Returns:
        dict: 新的配置字典
    """
    config = copy.deepcopy(CONFIG)
    if overrides:
        _merge(config, overrides)

    activation = config['model']['activation']
    if activation not in ACTIVATIONS:
        raise ValueError(f"不支持的激活函数: {activation}. 支持的函数: {', '.join(ACTIVATIONS)}")
    weight_init = config['init']['weight_init']
    if weight_init not in WEIGHT_INITS:
        raise ValueError(f"不支持的权重初始化方式: {weight_init}")
    return config

class EasyGradError(Exception):
    """easygrad 所有异常的基类"""


class ShapeMismatchError(EasyGradError, ValueError):
    """输入个数与神经元/层配置的宽度不一致"""

    def __init__(self, expected, got, where=''):
        self.expected = expected
        self.got = got
        self.where = where
        prefix = f"{where}: " if where else ''
        super().__init__(f"{prefix}期望 {expected} 个输入, 得到 {got} 个")


class StaleGradientError(EasyGradError, RuntimeError):
    """计算图中残留上一次反向传播的梯度"""


class CyclicGraphError(EasyGradError, RuntimeError):
    """计算图中存在环, 无法进行拓扑排序"""

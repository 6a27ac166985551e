class Optimizer:
    """优化器基类"""

    def __init__(self, parameters):
        self.parameters = list(parameters)
        if not self.parameters:
            raise ValueError("优化器的参数列表为空")

    def zero_grad(self):
        """清零梯度"""
        for param in self.parameters:
            param.grad = 0.0

    def step(self):
        """更新参数，子类需要实现"""
        raise NotImplementedError

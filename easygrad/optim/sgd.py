from easygrad.optim.optimizer import Optimizer


class SGD(Optimizer):
    """随机梯度下降优化器（支持动量, 指数加权平均形式）"""

    def __init__(self, parameters, lr=0.01, momentum=0.0):
        super().__init__(parameters)
        if lr <= 0:
            raise ValueError(f"学习率必须大于0, 得到 {lr}")
        if not 0.0 <= momentum < 1.0:
            raise ValueError(f"momentum 必须在 [0, 1) 之间, 得到 {momentum}")
        self.lr = lr
        self.momentum = momentum
        # 每个参数的历史梯度移动加权平均值
        self.momentum_buffer = [0.0 for _ in self.parameters]

    def step(self):
        """执行一步优化"""
        for i, param in enumerate(self.parameters):
            # Dt = β * St-1 + (1 - β) * Wt, β = 0 时退化为普通梯度下降
            self.momentum_buffer[i] = (self.momentum * self.momentum_buffer[i] +
                                       (1 - self.momentum) * param.grad)
            param.data -= self.lr * self.momentum_buffer[i]

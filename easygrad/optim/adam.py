import numpy as np

from easygrad.optim.optimizer import Optimizer


class Adam(Optimizer):
    """Adam优化器"""

    def __init__(self, parameters, lr=0.001, betas=(0.9, 0.999), eps=1e-8):
        super().__init__(parameters)
        self.lr = lr
        self.beta1, self.beta2 = betas
        self.eps = eps
        self.t = 0  # 时间步数

        self.m = np.zeros(len(self.parameters))  # 一阶动量估计
        self.v = np.zeros(len(self.parameters))  # 二阶动量估计

    def step(self):
        """执行一步优化"""
        self.t += 1
        grads = np.array([p.grad for p in self.parameters])

        self.m = self.beta1 * self.m + (1 - self.beta1) * grads
        self.v = self.beta2 * self.v + (1 - self.beta2) * grads ** 2

        # 偏差修正
        m_hat = self.m / (1 - self.beta1 ** self.t)
        v_hat = self.v / (1 - self.beta2 ** self.t)

        update = self.lr * m_hat / (np.sqrt(v_hat) + self.eps)
        for param, delta in zip(self.parameters, update):
            param.data -= float(delta)

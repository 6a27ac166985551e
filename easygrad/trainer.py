"""
训练循环: 每一步重新构建计算图, 清零梯度, 反向传播, 更新参数。
"""

import logging

from tqdm import tqdm

from easygrad.config import get_config

logger = logging.getLogger(__name__)


class Trainer:

    def __init__(self, model, optimizer, loss_fn, config=None):
        """
        model: 待训练的模块
        optimizer: easygrad.optim 中的优化器
        loss_fn: loss_fn(model, X, y) -> (loss_node, accuracy), 例如 easygrad.loss.svm_loss
        config: get_config() 返回的配置, None 时使用默认配置
        """
        self.model = model
        self.optimizer = optimizer
        self.loss_fn = loss_fn
        self.config = config or get_config()
        self.simple_logging = self.config['system']['simple_logging']
        self.lr0 = optimizer.lr
        self.history = []

    def _learning_rate(self, epoch, epochs):
        training = self.config['training']
        if not training['decay_lr'] or epochs <= 1:
            return self.lr0
        lr_min = min(training['lr_min'], self.lr0)
        return self.lr0 - (self.lr0 - lr_min) * epoch / (epochs - 1)

    def step(self, X, y):
        """一次前向 + 反向 + 参数更新"""
        loss, accuracy = self.loss_fn(self.model, X, y)
        self.optimizer.zero_grad()
        loss.backward()
        self.optimizer.step()
        return loss.data, accuracy

    def fit(self, X, y, epochs=None):
        if epochs is None:
            epochs = self.config['training']['epochs']

        iterator = range(epochs)
        pbar = None
        if not self.simple_logging:
            pbar = tqdm(iterator, desc="Train", ncols=100, leave=False)
            iterator = pbar

        for epoch in iterator:
            self.optimizer.lr = self._learning_rate(epoch, epochs)
            loss, accuracy = self.step(X, y)
            self.history.append({'epoch': epoch, 'loss': loss, 'accuracy': accuracy})

            if pbar is not None:
                pbar.set_postfix(loss=f"{loss:.4f}", acc=f"{accuracy:.2%}")
            logger.info("epoch %d/%d loss %.6f accuracy %.2f%% lr %.4f",
                        epoch + 1, epochs, loss, accuracy * 100, self.optimizer.lr)

        if pbar is not None:
            pbar.close()
        return self.history

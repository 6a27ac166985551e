import random

import numpy as np

from easygrad.config import get_config
from easygrad.engine import Node
from easygrad.errors import ShapeMismatchError


def _as_samples(x):
    if isinstance(x, Node) or np.ndim(x) == 0:
        return [x]
    return list(x)


class Loss:
    """损失函数基类"""

    def __init__(self, reduction='mean'):
        if reduction not in ['mean', 'sum', 'none']:
            raise ValueError(f"reduction必须是 'mean', 'sum' 或 'none', 得到 '{reduction}'")
        self.reduction = reduction

    def __call__(self, predictions, targets):
        # 单个节点或标量视为一个样本, 其他序列(list, numpy 数组)逐个展开
        predictions = _as_samples(predictions)
        targets = _as_samples(targets)
        if len(predictions) != len(targets):
            raise ShapeMismatchError(len(targets), len(predictions), where=self.__class__.__name__)
        if not predictions:
            raise ValueError("预测值列表为空")

        # 统一包装成节点, numpy 标量不能直接和 Node 做运算
        predictions = [p if isinstance(p, Node) else Node(p) for p in predictions]
        targets = [t if isinstance(t, Node) else Node(t) for t in targets]

        losses = [self.per_sample(p, t) for p, t in zip(predictions, targets)]
        return self._reduce(losses)

    def per_sample(self, pred, target):
        raise NotImplementedError

    def _reduce(self, losses):
        if self.reduction == 'none':
            return losses
        total = losses[0]
        for loss in losses[1:]:
            total = total + loss
        if self.reduction == 'sum':
            return total
        # 除以样本数量得到平均损失
        return total * (1.0 / len(losses))

    def __repr__(self):
        return self.__class__.__name__ + f"(reduction='{self.reduction}')"


class MSELoss(Loss):
    """均方误差损失函数

    计算公式: MSE = (1/n) * Σ(pred_i - target_i)^2
    """

    def per_sample(self, pred, target):
        diff = pred - target
        return diff * diff


class HingeLoss(Loss):
    """最大间隔(SVM)损失

    计算公式: L = (1/n) * Σ relu(1 - y_i * score_i), 标签 y_i 取 +1 / -1
    """

    def per_sample(self, pred, target):
        return (1 + -target * pred).relu()


def l2_regularization(parameters, alpha):
    """L2 正则项: alpha * Σ p^2"""
    total = Node(0.0)
    for p in parameters:
        total = total + p * p
    return alpha * total


def svm_loss(model, X, y, alpha=None, batch_size=None):
    """
    组装最大间隔损失 + L2 正则

    Args:
        model: 输出单个节点的 MLP
        X: 输入样本, 形状 [n_samples, nin]
        y: 标签 (+1 / -1)
        alpha: L2 正则系数, None 时读取配置
        batch_size: 随机抽取的样本数, None 表示使用全部样本

    Returns:
        (total_loss, accuracy): 损失节点和分类准确率
    """
    training = get_config()['training']
    alpha = training['alpha'] if alpha is None else alpha

    if batch_size is None:
        Xb, yb = X, y
    else:
        ri = random.sample(range(len(X)), batch_size)
        Xb, yb = [X[i] for i in ri], [y[i] for i in ri]

    inputs = [[Node(float(v)) for v in row] for row in Xb]
    scores = [model(x)[0] for x in inputs]

    data_loss = HingeLoss(reduction='mean')(scores, [float(yi) for yi in yb])
    reg_loss = l2_regularization(model.parameters(), alpha)
    total_loss = data_loss + reg_loss

    accuracy = [(yi > 0) == (s.data > 0) for yi, s in zip(yb, scores)]
    return total_loss, sum(accuracy) / len(accuracy)

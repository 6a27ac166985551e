import logging

import numpy as np

from easygrad.config import CONFIG
from easygrad.errors import CyclicGraphError, StaleGradientError

logger = logging.getLogger(__name__)


class Node:
    """
    计算图中的一个标量节点

    data:  前向计算结果, 由算子创建后不再修改
    grad:  梯度累加器, 反向传播后表示 d(root)/d(self)
    _prev: 操作数(有序, 允许重复, 例如 x * x 记录为 (x, x))
    _op:   算子标记, 叶子节点为 ''. 反向传播时按标记查表得到局部求导规则
    _ctx:  求导规则需要的常量(目前只有幂运算的指数)
    """

    def __init__(self, data, _children=(), _op='', _ctx=None, label=''):
        # 存储数值
        self.data = float(data)
        # 存储梯度
        self.grad = 0.0
        # 操作数, 用于构建计算图
        self._prev = tuple(_children)
        # 操作类型, 同时决定反向传播规则
        self._op = _op
        self._ctx = _ctx
        # 可视化时显示的名字
        self.label = label

    @property
    def op(self):
        return self._op

    @property
    def operands(self):
        return frozenset(self._prev)

    @property
    def is_leaf(self):
        return not self._prev

    def __add__(self, other):
        return add(self, other)

    def __mul__(self, other):
        return mul(self, other)

    def __pow__(self, other):
        return pow(self, other)

    def relu(self):
        return relu(self)

    def tanh(self):
        return tanh(self)

    def sigmoid(self):
        return sigmoid(self)

    def exp(self):
        return exp(self)

    def log(self):
        return log(self)

    def __neg__(self):  # -self
        return self * -1

    def __radd__(self, other):  # other + self
        return self + other

    def __sub__(self, other):  # self - other
        return self + (-other)

    def __rsub__(self, other):  # other - self
        return other + (-self)

    def __rmul__(self, other):  # other * self
        return self * other

    def __truediv__(self, other):  # self / other
        return self * other ** -1

    def __rtruediv__(self, other):  # other / self
        return other * self ** -1

    def backward(self, accumulate=None):
        backward(self, accumulate=accumulate)

    def zero_grad(self):
        self.grad = 0.0

    def __repr__(self):
        return f"Node(data={self.data}, grad={self.grad})"


def _as_node(x):
    # 标量自动包装成叶子节点
    return x if isinstance(x, Node) else Node(x)


def add(a, b):
    a, b = _as_node(a), _as_node(b)
    return Node(a.data + b.data, (a, b), '+')


def mul(a, b):
    a, b = _as_node(a), _as_node(b)
    return Node(a.data * b.data, (a, b), '*')


def pow(a, k):
    if isinstance(k, bool) or not isinstance(k, (int, float)):
        raise TypeError(f"指数只支持 int/float 常量, 得到 {type(k).__name__}")
    a = _as_node(a)
    return Node(a.data ** k, (a,), '**', _ctx=k)


def relu(a):
    a = _as_node(a)
    return Node(0.0 if a.data < 0 else a.data, (a,), 'ReLU')


def tanh(a):
    a = _as_node(a)
    return Node(np.tanh(a.data), (a,), 'tanh')


def sigmoid(a):
    a = _as_node(a)
    # 防止 exp 溢出
    x = min(max(a.data, -500.0), 500.0)
    return Node(1.0 / (1.0 + np.exp(-x)), (a,), 'sigmoid')


def exp(a):
    a = _as_node(a)
    return Node(np.exp(a.data), (a,), 'exp')


def log(a):
    a = _as_node(a)
    if a.data <= 0:
        raise ValueError(f"log函数要求输入大于0，但得到 {a.data}")
    return Node(np.log(a.data), (a,), 'log')


def _add_backward(out):
    a, b = out._prev
    a.grad += out.grad
    b.grad += out.grad


def _mul_backward(out):
    a, b = out._prev
    a.grad += b.data * out.grad
    b.grad += a.data * out.grad


def _pow_backward(out):
    (a,) = out._prev
    k = out._ctx
    a.grad += (k * a.data ** (k - 1)) * out.grad


def _relu_backward(out):
    (a,) = out._prev
    a.grad += (out.data > 0) * out.grad


def _tanh_backward(out):
    (a,) = out._prev
    a.grad += (1 - out.data ** 2) * out.grad


def _sigmoid_backward(out):
    (a,) = out._prev
    s = out.data
    a.grad += s * (1 - s) * out.grad


def _exp_backward(out):
    (a,) = out._prev
    a.grad += out.data * out.grad


def _log_backward(out):
    (a,) = out._prev
    a.grad += out.grad / a.data


def _leaf_backward(out):
    pass


# 算子标记 -> 局部求导规则. 新增算子时在这里登记
BACKWARD_RULES = {
    '': _leaf_backward,
    '+': _add_backward,
    '*': _mul_backward,
    '**': _pow_backward,
    'ReLU': _relu_backward,
    'tanh': _tanh_backward,
    'sigmoid': _sigmoid_backward,
    'exp': _exp_backward,
    'log': _log_backward,
}


def topological_sort(root):
    """
    深度优先后序遍历, 返回 "操作数在前, 使用者在后" 的节点列表

    用显式栈代替递归, 长链(例如几千项求和)不会触发递归深度限制。
    每个节点只出现一次; 遍历中遇到仍在当前路径上的节点说明存在环。
    """
    topo = []
    done = set()
    on_path = set()
    stack = [(root, False)]  # (节点, 子节点是否已展开)

    while stack:
        node, expanded = stack.pop()

        if expanded:
            on_path.discard(node)
            done.add(node)
            topo.append(node)
            continue

        if node in done:
            continue
        if node in on_path:
            raise CyclicGraphError(f"计算图中存在环: {node!r}")

        on_path.add(node)
        stack.append((node, True))
        for child in reversed(node._prev):
            if child in on_path:
                raise CyclicGraphError(f"计算图中存在环: {child!r} 是自己的操作数")
            if child not in done:
                stack.append((child, False))

    return topo


def backward(root, accumulate=None):
    """
    从 root 开始反向传播, 原地更新所有可达节点的 grad

    Args:
        root: 求导的目标节点
        accumulate: 是否允许在残留梯度上继续累加.
            None 时读取 CONFIG['engine']['allow_accumulation'].
            不允许时, 若可达节点的 grad 不为 0 则抛出 StaleGradientError
    """
    if accumulate is None:
        accumulate = CONFIG['engine']['allow_accumulation']

    # 第一步：拓扑排序，确保按正确顺序处理节点
    topo = topological_sort(root)
    logger.debug("拓扑排序节点数: %d", len(topo))

    if not accumulate:
        stale = sum(1 for v in topo if v.grad != 0)
        if stale:
            raise StaleGradientError(
                f"{stale} 个节点残留上一次反向传播的梯度, 请先调用 zero_grad() "
                f"或使用 accumulate=True")

    # 第二步：初始化输出节点的梯度为1
    root.grad = 1.0
    # 第三步：按拓扑序逆序进行反向传播
    for v in reversed(topo):
        BACKWARD_RULES[v._op](v)


def zero_grad(nodes):
    for n in nodes:
        n.grad = 0.0

import random

from easygrad.config import ACTIVATIONS, get_config
from easygrad.engine import Node, add, mul
from easygrad.errors import ShapeMismatchError


class Module:

    def zero_grad(self):
        for p in self.parameters():
            p.grad = 0.0

    def parameters(self):
        return []

    def named_parameters(self, prefix=''):
        return []

    def state_dict(self):
        """
        返回 {参数名: 数值} 字典

        比如: {'layers.0.neurons.0.w.0': 0.80, ..., 'layers.0.neurons.0.b': 0.0}
        """
        return {name: p.data for name, p in self.named_parameters()}

    def load_state_dict(self, state_dict, strict=True):
        """
        从状态字典加载参数

        Args:
            state_dict: {参数名: 数值}
            strict: 是否要求参数名完全匹配

        Returns:
            tuple: (missing_keys, unexpected_keys)
        """
        own = dict(self.named_parameters())
        missing_keys = [k for k in own if k not in state_dict]
        unexpected_keys = [k for k in state_dict if k not in own]

        if strict and (missing_keys or unexpected_keys):
            raise ShapeMismatchError(
                len(own), len(state_dict),
                where=f"load_state_dict(缺失 {missing_keys[:5]}, 多余 {unexpected_keys[:5]})")

        for name, p in own.items():
            if name in state_dict:
                p.data = float(state_dict[name])
        return missing_keys, unexpected_keys


class Neuron(Module):

    def __init__(self, nin, nonlin=True, activation=None, weights=None, bias=None, config=None):
        """
        nin: 输入维度
        nonlin: 是否在线性组合之后应用激活函数
        activation: 激活函数类型 - 'sigmoid', 'relu', 'tanh', 'linear'; None 时读取配置
        weights: 指定的权重列表，如果为None则按配置初始化
        bias: 指定的偏置值，如果为None则按配置初始化
        """
        config = config or get_config()
        init = config['init']

        if weights is not None:
            if len(weights) != nin:
                raise ShapeMismatchError(nin, len(weights), where='Neuron 权重')
            self.w = [Node(w) for w in weights]
        elif init['weight_init'] == 'constant':
            self.w = [Node(init['init_value']) for _ in range(nin)]
        else:
            self.w = [Node(random.uniform(-1, 1)) for _ in range(nin)]

        self.b = Node(bias if bias is not None else init['bias_value'])

        activation = activation or config['model']['activation']
        if activation not in ACTIVATIONS:
            raise ValueError(f"不支持的激活函数: {activation}. 支持的函数: {', '.join(ACTIVATIONS)}")
        self.nonlin = nonlin
        self.activation = activation

    def __call__(self, x):
        if len(x) != len(self.w):
            raise ShapeMismatchError(len(self.w), len(x), where='Neuron')

        act = self.b
        for wi, xi in zip(self.w, x):
            act = add(act, mul(wi, xi))

        if not self.nonlin or self.activation == 'linear':
            return act
        if self.activation == 'relu':
            return act.relu()
        if self.activation == 'tanh':
            return act.tanh()
        return act.sigmoid()

    def parameters(self):
        """
        返回神经元的所有参数

        返回: 权重列表 + 偏置 = [w1, w2, ..., wn, b]
        """
        return self.w + [self.b]

    def named_parameters(self, prefix=''):
        named = [(f"{prefix}w.{i}", w) for i, w in enumerate(self.w)]
        named.append((f"{prefix}b", self.b))
        return named

    def __repr__(self):
        kind = self.activation.capitalize() if self.nonlin else 'Linear'
        return f"{kind}Neuron({len(self.w)})"


class Layer(Module):

    def __init__(self, nin, nout, nonlin=True, **kwargs):
        self.nin = nin
        self.neurons = [Neuron(nin, nonlin=nonlin, **kwargs) for _ in range(nout)]

    def __call__(self, x):
        if len(x) != self.nin:
            raise ShapeMismatchError(self.nin, len(x), where='Layer')
        return [n(x) for n in self.neurons]

    def parameters(self):
        return [p for n in self.neurons for p in n.parameters()]

    def named_parameters(self, prefix=''):
        return [item for j, n in enumerate(self.neurons)
                for item in n.named_parameters(f"{prefix}neurons.{j}.")]

    def __repr__(self):
        return f"Layer of [{', '.join(str(n) for n in self.neurons)}]"


class MLP(Module):

    def __init__(self, nin, nouts, activation=None, config=None):
        """
        nin: 输入维度
        nouts: 每一层的输出维度, 例如 [16, 16, 1]
        activation: 隐藏层激活函数, 输出层始终为线性
        """
        config = config or get_config()
        sz = [nin] + list(nouts)
        self.layers = [
            Layer(sz[i], sz[i + 1], nonlin=i != len(nouts) - 1,
                  activation=activation, config=config)
            for i in range(len(nouts))
        ]

    def __call__(self, x):
        for layer in self.layers:
            x = layer(x)
        return x

    def parameters(self):
        return [p for layer in self.layers for p in layer.parameters()]

    def named_parameters(self, prefix=''):
        return [item for i, layer in enumerate(self.layers)
                for item in layer.named_parameters(f"{prefix}layers.{i}.")]

    def __repr__(self):
        return f"MLP of [{', '.join(str(layer) for layer in self.layers)}]"

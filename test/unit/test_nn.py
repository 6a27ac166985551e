import math
import random

import pytest

from easygrad.config import get_config
from easygrad.engine import Node
from easygrad.errors import ShapeMismatchError
from easygrad.nn import MLP, Layer, Module, Neuron


@pytest.fixture
def constant_config():
    return get_config({'init': {'weight_init': 'constant', 'init_value': 1.0}})


def test_parameter_count():
    net = MLP(2, [16, 16, 1])
    assert len(net.parameters()) == 2 * 16 + 16 * 16 + 16 * 1 + 16 + 16 + 1
    assert len(set(net.parameters())) == len(net.parameters())


def test_parameter_order():
    neuron = Neuron(3)
    params = neuron.parameters()
    assert params[:3] == neuron.w
    assert params[-1] is neuron.b

    layer = Layer(2, 3)
    assert layer.parameters() == [p for n in layer.neurons for p in n.parameters()]

    net = MLP(2, [3, 1])
    assert net.parameters() == net.layers[0].parameters() + net.layers[1].parameters()


def test_mlp_layer_widths():
    net = MLP(2, [4, 3, 1])
    assert [len(layer.neurons) for layer in net.layers] == [4, 3, 1]
    assert [len(layer.neurons[0].w) for layer in net.layers] == [2, 4, 3]
    # 只有输出层是线性的
    assert [layer.neurons[0].nonlin for layer in net.layers] == [True, True, False]


def test_neuron_forward_constant_weights(constant_config):
    neuron = Neuron(2, nonlin=False, config=constant_config)
    out = neuron([Node(1.0), Node(2.0)])
    assert out.data == 3.0

    out.backward()
    assert [w.grad for w in neuron.w] == [1.0, 2.0]
    assert neuron.b.grad == 1.0


def test_neuron_explicit_weights():
    neuron = Neuron(2, activation='relu', weights=[0.5, -1.0], bias=0.25)
    assert neuron([2.0, 3.0]).data == 0.0
    assert neuron([2.0, 0.0]).data == 1.25
    assert repr(neuron) == "ReluNeuron(2)"


def test_neuron_activations():
    x = [Node(1.0)]
    assert Neuron(1, activation='tanh', weights=[1.0])(x).data == pytest.approx(math.tanh(1.0))
    assert Neuron(1, activation='sigmoid', weights=[0.0])(x).data == 0.5
    assert Neuron(1, activation='linear', weights=[-2.0])(x).data == -2.0
    with pytest.raises(ValueError):
        Neuron(1, activation='gelu')


def test_shape_mismatch():
    with pytest.raises(ShapeMismatchError):
        Neuron(3)([Node(1.0), Node(2.0)])
    with pytest.raises(ShapeMismatchError):
        Neuron(2, weights=[1.0])
    with pytest.raises(ShapeMismatchError):
        Layer(2, 3)([1.0, 2.0, 3.0])
    with pytest.raises(ValueError):
        MLP(2, [3, 1])([1.0])


def test_mlp_end_to_end():
    """MLP(2, [3, 1]) 输入 [1.0, 2.0], 所有参数的梯度都是有限值"""
    random.seed(0)
    net = MLP(2, [3, 1])
    out = net([Node(1.0), Node(2.0)])
    assert len(out) == 1

    out[0].backward()
    for p in net.parameters():
        assert math.isfinite(p.grad)


def test_mlp_gradients_constant_weights(constant_config):
    net = MLP(2, [3, 1], config=constant_config)
    out = net([1.0, 2.0])[0]
    # 隐藏层每个神经元输出 1 + 2 = 3, 输出层 3 * 3 = 9
    assert out.data == 9.0

    out.backward()
    hidden, output = net.layers
    assert [w.grad for w in output.neurons[0].w] == [3.0, 3.0, 3.0]
    assert output.neurons[0].b.grad == 1.0
    for n in hidden.neurons:
        assert [w.grad for w in n.w] == [1.0, 2.0]
        assert n.b.grad == 1.0


def test_shared_input_accumulates_across_neurons(constant_config):
    """同一个输入节点被层内所有神经元使用, 梯度求和"""
    layer = Layer(1, 4, nonlin=False, config=constant_config)
    x = Node(5.0)
    outs = layer([x])
    total = outs[0]
    for o in outs[1:]:
        total = total + o
    total.backward()
    assert x.grad == 4.0


def test_zero_grad():
    net = MLP(2, [3, 1])
    net([1.0, 2.0])[0].backward()
    net.zero_grad()
    assert all(p.grad == 0 for p in net.parameters())
    net.zero_grad()
    assert all(p.grad == 0 for p in net.parameters())

    # 清零后可以在新的计算图上再次反向传播
    net([1.0, 2.0])[0].backward()


def test_state_dict_roundtrip():
    random.seed(1)
    src = MLP(2, [3, 1])
    dst = MLP(2, [3, 1])
    state = src.state_dict()
    assert len(state) == len(src.parameters())
    assert 'layers.0.neurons.2.w.1' in state
    assert 'layers.1.neurons.0.b' in state

    missing, unexpected = dst.load_state_dict(state)
    assert missing == [] and unexpected == []
    assert [p.data for p in dst.parameters()] == [p.data for p in src.parameters()]


def test_load_state_dict_strict():
    net = MLP(2, [3, 1])
    state = net.state_dict()
    del state['layers.0.neurons.0.b']
    state['extra'] = 1.0

    with pytest.raises(ShapeMismatchError):
        net.load_state_dict(state)

    missing, unexpected = net.load_state_dict(state, strict=False)
    assert missing == ['layers.0.neurons.0.b']
    assert unexpected == ['extra']


def test_module_base():
    m = Module()
    assert m.parameters() == []
    m.zero_grad()
    assert m.state_dict() == {}

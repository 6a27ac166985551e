# easygrad/__init__.py
# 标量自动微分引擎 + MLP

from easygrad.engine import (
    Node,
    add,
    mul,
    backward,
    topological_sort,
    zero_grad,
)
from easygrad.errors import (
    EasyGradError,
    ShapeMismatchError,
    StaleGradientError,
    CyclicGraphError,
)
from easygrad.config import CONFIG, get_config
from easygrad.nn import Module, Neuron, Layer, MLP

__all__ = [
    # Engine
    'Node',
    'add',
    'mul',
    'backward',
    'topological_sort',
    'zero_grad',
    # Errors
    'EasyGradError',
    'ShapeMismatchError',
    'StaleGradientError',
    'CyclicGraphError',
    # Config
    'CONFIG',
    'get_config',
    # nn
    'Module',
    'Neuron',
    'Layer',
    'MLP',
]

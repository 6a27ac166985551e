import random

import pytest

from easygrad.config import get_config
from easygrad.data import make_moons
from easygrad.loss import svm_loss
from easygrad.nn import MLP
from easygrad.optim import SGD
from easygrad.trainer import Trainer


def test_fit_reduces_loss():
    random.seed(1337)
    X, y = make_moons(n_samples=30, noise=0.1, seed=1)
    model = MLP(2, [8, 1])
    config = get_config({'system': {'simple_logging': True},
                         'training': {'lr_min': 0.05}})

    trainer = Trainer(model, SGD(model.parameters(), lr=0.5), svm_loss, config=config)
    history = trainer.fit(X, y, epochs=30)

    assert len(history) == 30
    assert [h['epoch'] for h in history] == list(range(30))
    print(f"loss {history[0]['loss']:.4f} -> {history[-1]['loss']:.4f}, "
          f"accuracy {history[-1]['accuracy']:.2%}")
    assert history[-1]['loss'] < history[0]['loss']
    # 学习率线性衰减到 lr_min
    assert trainer.optimizer.lr == pytest.approx(0.05)


def test_fit_with_progress_bar():
    random.seed(0)
    X, y = make_moons(n_samples=10, seed=0)
    model = MLP(2, [4, 1])
    config = get_config({'training': {'decay_lr': False}})
    trainer = Trainer(model, SGD(model.parameters(), lr=0.1), svm_loss, config=config)

    history = trainer.fit(X, y, epochs=2)
    assert len(history) == 2
    assert trainer.optimizer.lr == 0.1


def test_fit_zero_epochs():
    random.seed(0)
    X, y = make_moons(n_samples=10, seed=0)
    model = MLP(2, [4, 1])
    before = [p.data for p in model.parameters()]
    config = get_config({'system': {'simple_logging': True}})
    trainer = Trainer(model, SGD(model.parameters(), lr=0.1), svm_loss, config=config)

    assert trainer.fit(X, y, epochs=0) == []
    assert [p.data for p in model.parameters()] == before

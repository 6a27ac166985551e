from easygrad.utils.draw_utils import draw_dot, trace

__all__ = ['draw_dot', 'trace']

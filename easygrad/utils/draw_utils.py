import uuid

from graphviz import Digraph

"""
计算图可视化。

使用示例：
a = Node(2.0, label='a')
b = Node(3.0, label='b')
d = (a + b) * 2
d.backward()

dot = draw_dot(d)
dot.view()  # 将显示: a,b -> + -> * -> d
"""


def trace(root):
    """
    遍历计算图，收集所有节点和边

    参数:
        root: 计算图的根节点（通常是最终的输出节点）

    返回:
        nodes: set，包含计算图中所有节点的集合
        edges: set，每条边是一个元组(操作数, 使用者)。x * x 这样的重复操作数只记一条边
    """
    nodes, edges = set(), set()
    stack = [root]
    while stack:
        v = stack.pop()
        if v in nodes:
            continue
        nodes.add(v)
        for child in v._prev:
            edges.add((child, v))
            stack.append(child)
    return nodes, edges


def draw_dot(root, format='svg', rankdir='LR'):
    """
    使用Graphviz创建计算图的可视化

    参数:
        root: 计算图的根节点
        format: 输出格式，默认'svg', 也可以是 'png', 'pdf'
        rankdir: 图的布局方向，'LR' 从左到右, 'TB' 从上到下

    返回:
        dot: Graphviz的Digraph对象，可以调用.render()或.view()方法
    """
    if rankdir not in ['LR', 'TB']:
        raise ValueError(f"rankdir 只支持 'LR' 或 'TB', 得到 '{rankdir}'")

    nodes, edges = trace(root)
    dot = Digraph(name=str(uuid.uuid4()), format=format, graph_attr={'rankdir': rankdir})

    for n in nodes:
        # 节点显示格式：{ label | data 数值 | grad 梯度值 }
        dot.node(name=str(id(n)),
                 label="{ %s | data %.4f | grad %.4f }" % (n.label, n.data, n.grad),
                 shape='record')
        # 如果节点有操作符，创建操作符节点并指向数据节点
        if n.op:
            dot.node(name=str(id(n)) + n.op, label=n.op)
            dot.edge(str(id(n)) + n.op, str(id(n)))

    for n1, n2 in edges:
        dot.edge(str(id(n1)), str(id(n2)) + n2.op)

    return dot

class GradOpsError(Exception):
    """
    Base class for errors raised by `gradops`.
    """


class ShapeMismatchError(GradOpsError, ValueError):
    """
    Operand shapes are incompatible with the requested operation, or a gradient contribution does not match the shape of the node receiving it.
    """


class GraphCorruptedError(GradOpsError, RuntimeError):
    """
    A node holds a different number of operands than its operation requires. The graph cannot be differentiated.
    """

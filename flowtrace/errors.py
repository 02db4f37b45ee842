# errors.py


class FlowTraceError(Exception):
    pass


class MalformedInputError(FlowTraceError, ValueError):
    """Declared network can't be run: bad capacity, unknown node, missing source/sink."""


class InvariantViolation(FlowTraceError, RuntimeError):
    """Raised when residual, excess or reported flow bookkeeping goes wrong.

    The algorithms make this impossible by construction, so seeing it means a
    defect in an engine, not bad input.
    """

"""Engine exceptions."""


class EngineError(Exception):
    """A module was called outside its contract.

    Missing optional survey data never raises — this signals a bug in the
    caller (e.g. a gated module invoked without its section, or an unknown
    system id reaching the timeline builder). The orchestrator does not
    recover from it.
    """

"""
Run-level failures of the ReAct agent.

Malformed model output and tool failures are recovered inside the loop and
never show up here. Anything raised from this module ends the run with an
`error` event.
"""


class ReactAgentError(Exception):
    """Base class for errors that abort a ReAct run."""


class OracleError(ReactAgentError):
    """The language model call failed (network, auth, quota...)."""


class SynthesisError(OracleError):
    """The fallback answer could not be generated after the step budget ran out."""


class RunCancelled(ReactAgentError):
    """The run was cancelled between steps."""

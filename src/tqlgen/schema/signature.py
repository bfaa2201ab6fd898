"""
Function signature extraction.

Function bodies are kept as flat token values by the parser. The signature
(parameters and return type) is recovered here by a small state machine so the
grammar does not need to understand TypeQL query syntax.
"""

from enum import Enum, auto

from tqlgen.schema.model import ParameterSpec

OPEN_BRACKETS = frozenset("([{")
CLOSE_BRACKETS = frozenset(")]}")


class Phase(Enum):
    SEEK_PARAMS = auto()
    IN_PARAMS = auto()
    SEEK_ARROW = auto()
    IN_RETURN = auto()
    DONE = auto()


def extract_signature(body: list[str]) -> tuple[list[ParameterSpec], str | None]:
    """Extract parameters and the return type from a function's token values.

    Parameters come from the first top-level parenthesized group, split on
    top-level commas. The return type is every token after the first `->`
    following the parameters, up to the next `:`, joined with single spaces.

    Args:
        body: Token values following the function name

    Returns:
        Tuple of (parameters, return type or None)
    """
    phase = Phase.SEEK_PARAMS
    depth = 0
    runs: list[list[str]] = []
    current: list[str] = []
    return_tokens: list[str] = []

    for value in body:
        if phase == Phase.SEEK_PARAMS:
            if value == "(":
                phase = Phase.IN_PARAMS
                depth = 1
            elif value == "->":
                # No parameter list at all
                phase = Phase.IN_RETURN

        elif phase == Phase.IN_PARAMS:
            if value in OPEN_BRACKETS:
                depth += 1
            elif value in CLOSE_BRACKETS:
                depth -= 1
                if depth == 0:
                    if current:
                        runs.append(current)
                    current = []
                    phase = Phase.SEEK_ARROW
                    continue
            if depth == 1 and value == ",":
                if current:
                    runs.append(current)
                current = []
            else:
                current.append(value)

        elif phase == Phase.SEEK_ARROW:
            # Anything between the parameters and the first arrow is skipped
            if value == "->":
                phase = Phase.IN_RETURN

        elif phase == Phase.IN_RETURN:
            if value == ":":
                phase = Phase.DONE
            else:
                return_tokens.append(value)

        if phase == Phase.DONE:
            break

    parameters = [_parameter_from_run(run) for run in runs]
    return_type = " ".join(return_tokens) if return_tokens else None
    return parameters, return_type


def _parameter_from_run(run: list[str]) -> ParameterSpec:
    """Turn `$name : type` token values into a parameter."""
    if ":" in run:
        split = run.index(":")
        name_tokens, type_tokens = run[:split], run[split + 1 :]
    else:
        name_tokens, type_tokens = run, []

    name = "".join(name_tokens).lstrip("$")
    return ParameterSpec(name=name, type_name=" ".join(type_tokens))

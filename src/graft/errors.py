__all__ = ["DependencyError", "ConfigurationFailed", "ProvisionError"]


class DependencyError(Exception):
    """Raised when a binding's dependencies cannot be resolved."""

    pass


class ConfigurationFailed(DependencyError):
    """Raised when a configuration pass reported one or more problems.

    Every problem is kept, in the order it was reported, so callers see the
    whole set from a single attempt.
    """

    def __init__(self, problems):
        self.problems = tuple(problems)
        super().__init__(_format_problems(self.problems))


class ProvisionError(DependencyError):
    """Raised when the host invokes a provider that cannot produce its value."""

    pass


def _format_problems(problems) -> str:
    lines = ["Unable to create bundle, see the following errors:"]
    for index, problem in enumerate(problems, start=1):
        lines.append(f"{index}) {problem.message}")
    lines.append(f"{len(problems)} error{'' if len(problems) == 1 else 's'}")
    return "\n".join(lines)

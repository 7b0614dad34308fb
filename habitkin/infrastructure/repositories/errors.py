"""Failures raised by the profile and task stores."""


class ProfileStoreError(RuntimeError):
    """The profile store could not be read or written.

    The message is safe to show to the user.
    """


class TaskStoreError(RuntimeError):
    """A task or completion write did not reach storage; nothing was changed."""

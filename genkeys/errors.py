"""Error types raised while deriving the genesis key set."""

from typing import Optional, Sequence


class GenesisKeysError(Exception):
	"""Base class for every failure that aborts a run."""


class MissingSecretError(GenesisKeysError):
	def __init__(self, variable: str = "SECRET"):
		super().__init__(f"${variable} unset, please export the environment variable ${variable} first.")
		self.variable = variable


class KeyToolError(GenesisKeysError):
	"""The key tool could not be started or exited non-zero.

	`command` is the argv with the secret URI already masked.
	"""

	def __init__(
		self,
		message: str,
		command: Optional[Sequence[str]] = None,
		returncode: Optional[int] = None,
		stderr: str = "",
	):
		super().__init__(message)
		self.command = list(command or [])
		self.returncode = returncode
		self.stderr = stderr


class KeyOutputError(KeyToolError):
	"""The key tool succeeded but printed something we cannot read."""

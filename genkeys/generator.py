import logging
import os
import sys
from dataclasses import dataclass, field
from typing import List, NamedTuple, Optional, TextIO

from . import snippets
from .errors import MissingSecretError
from .subkey import DEFAULT_SCHEME, KeyBackend, KeyInfo


logger = logging.getLogger(__name__)

VALIDATOR_COUNT = 5
VALIDATOR_ROLE = "validator"


class AuxRole(NamedTuple):
	key_type: str
	path_role: str
	scheme: str


# Order matches the AuthorityKeysTuple fields after the validator pair.
AUX_ROLES = [
	AuxRole("babe", "babe", DEFAULT_SCHEME),
	# Grandpa must use ed25519.
	AuxRole("gran", "grandpa", "ed25519"),
	AuxRole("imon", "im_online", DEFAULT_SCHEME),
	AuxRole("audi", "authority_discovery", DEFAULT_SCHEME),
]


@dataclass
class ValidatorKeys:
	index: int
	referral_id: str
	key_dir: str
	validator: KeyInfo
	aux: List[KeyInfo] = field(default_factory=list)


@dataclass
class GenesisKeySet:
	chain: str
	keys_dir: str
	validators: List[ValidatorKeys] = field(default_factory=list)
	root: Optional[KeyInfo] = None


class GenesisKeyGenerator:
	"""Derive the genesis validator set and root key from one root secret.

	Every derivation goes through `backend`; auxiliary keys are also written
	into `<keys_dir>/<referral_name><index>` by the key tool.
	"""

	def __init__(
		self,
		secret: str,
		backend: KeyBackend,
		referral_name: str,
		keys_dir: str = "keys",
		chain: str = "mainnet",
	):
		if not secret:
			raise MissingSecretError()
		self._secret = secret
		self.backend = backend
		self.referral_name = referral_name
		self.keys_dir = keys_dir
		self.chain = chain

	def _path(self, role: str, index: int) -> str:
		return snippets.derivation_path(self._secret, role, index)

	def derive_validator(self, index: int) -> ValidatorKeys:
		referral_id = f"{self.referral_name}{index}"
		key_dir = os.path.join(self.keys_dir, referral_id)

		logger.info("Deriving validator %d (%s)", index, referral_id)
		validator = self.backend.inspect_key(DEFAULT_SCHEME, self._path(VALIDATOR_ROLE, index))
		keys = ValidatorKeys(index=index, referral_id=referral_id, key_dir=key_dir, validator=validator)

		for role in AUX_ROLES:
			logger.info("Inserting %s key (%s) for validator %d into %s", role.key_type, role.scheme, index, key_dir)
			keys.aux.append(
				self.backend.insert_key(role.key_type, role.scheme, self.chain, key_dir, self._path(role.path_role, index))
			)
		return keys

	def derive_root(self) -> KeyInfo:
		logger.info("Deriving root key")
		return self.backend.inspect_key(DEFAULT_SCHEME, self._secret)

	def generate(self, out: Optional[TextIO] = None) -> GenesisKeySet:
		"""Derive every key, printing the snippets to `out` as they are produced."""
		out = out or sys.stdout
		result = GenesisKeySet(chain=self.chain, keys_dir=self.keys_dir)

		def emit(lines: List[str]) -> None:
			for line in lines:
				print(line, file=out)

		for index in range(1, VALIDATOR_COUNT + 1):
			emit(snippets.validator_header(index, VALIDATOR_ROLE, [r.path_role for r in AUX_ROLES]))
			keys = self.derive_validator(index)
			emit(snippets.authority_tuple(keys.validator, keys.referral_id, keys.aux))
			emit([""])
			result.validators.append(keys)

		result.root = self.derive_root()
		emit(snippets.root_block(result.root))
		emit([f"The generated keys are in directory {self.keys_dir}"])
		return result

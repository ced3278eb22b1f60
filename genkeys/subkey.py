import json
import logging
import subprocess
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from eth_utils import decode_hex, is_0x_prefixed, is_hex, remove_0x_prefix

from .errors import KeyOutputError, KeyToolError


logger = logging.getLogger(__name__)

DEFAULT_SCHEME = "sr25519"
OUTPUT_TYPES = ("json", "text")
PUBLIC_KEY_BYTES = 32
SURI_MASK = "<suri>"

# Field labels printed by `key inspect` in text mode.
TEXT_PUBLIC_KEY = "public key (hex)"
TEXT_ADDRESS = "ss58 address"


@dataclass(frozen=True)
class KeyInfo:
	"""Public half of a derived key as reported by the key tool."""
	address: str
	public_key: str

	@property
	def public_key_hex(self) -> str:
		"""Public key without the 0x prefix, as `hex!` literals want it."""
		return remove_0x_prefix(self.public_key)

	def as_dict(self) -> Dict[str, str]:
		return {"address": self.address, "publicKey": self.public_key}


def check_public_key(value: Any) -> str:
	"""Return `value` if it is a 0x-prefixed 32-byte hex string, else raise KeyOutputError."""
	if not isinstance(value, str) or not is_0x_prefixed(value) or not is_hex(value):
		raise KeyOutputError(f"public key is not 0x-prefixed hex: {value!r}")
	try:
		raw = decode_hex(value)
	except ValueError as exc:
		raise KeyOutputError(f"public key is not valid hex: {value!r}") from exc
	if len(raw) != PUBLIC_KEY_BYTES:
		raise KeyOutputError(f"public key is not {PUBLIC_KEY_BYTES} bytes: {value!r}")
	return value


def _check_address(value: Any) -> str:
	if not isinstance(value, str) or not value.strip() or any(c.isspace() for c in value.strip()):
		raise KeyOutputError(f"unexpected address: {value!r}")
	return value.strip()


def parse_inspect_json(output: str) -> KeyInfo:
	"""Read `key inspect --output-type json` output."""
	try:
		data = json.loads(output)
	except ValueError as exc:
		raise KeyOutputError(f"key inspect did not print JSON: {exc}") from exc
	if not isinstance(data, dict):
		raise KeyOutputError("key inspect JSON is not an object")
	for field in ("publicKey", "ss58Address"):
		if field not in data:
			raise KeyOutputError(f"key inspect JSON has no {field!r} field")
	return KeyInfo(address=_check_address(data["ss58Address"]), public_key=check_public_key(data["publicKey"]))


def parse_inspect_text(output: str) -> KeyInfo:
	"""Read the human-readable `key inspect` output, matching fields by label."""
	fields: Dict[str, str] = {}
	for line in output.splitlines():
		label, sep, value = line.strip().partition(":")
		if sep and value.strip():
			fields[label.strip().lower()] = value.strip()
	for label in (TEXT_PUBLIC_KEY, TEXT_ADDRESS):
		if label not in fields:
			raise KeyOutputError(f"key inspect output has no {label!r} line")
	return KeyInfo(
		address=_check_address(fields[TEXT_ADDRESS]),
		public_key=check_public_key(fields[TEXT_PUBLIC_KEY]),
	)


def secret_parts(suri: str) -> List[str]:
	"""The full URI and its root phrase (text before the first junction), longest first."""
	phrase = suri.split("/", 1)[0]
	return [s for s in dict.fromkeys([suri, phrase]) if s]


def mask_secret(text: str, secrets: List[str]) -> str:
	for secret in secrets:
		text = text.replace(secret, SURI_MASK)
	return text


class KeyBackend:
	"""Derives keys on behalf of the generator.

	Implementations return the public key and address for a secret URI; they
	are the only place that knows how the key tool is driven.
	"""

	def inspect_key(self, scheme: str, suri: str) -> KeyInfo:
		raise NotImplementedError

	def insert_key(self, key_type: str, scheme: str, chain: str, base_path: str, suri: str) -> KeyInfo:
		"""Persist the key into the keystore under `base_path` and return its public half."""
		raise NotImplementedError


class SubprocessKeyBackend(KeyBackend):
	"""KeyBackend driving a Substrate-style node binary through `key inspect` / `key insert`."""

	def __init__(self, binary: str, network: Optional[str] = None, output_type: str = "json"):
		if output_type not in OUTPUT_TYPES:
			raise ValueError(f"output_type must be one of {OUTPUT_TYPES}, got {output_type!r}")
		self.binary = binary
		self.network = network
		self.output_type = output_type

	def inspect_command(self, scheme: str, suri: str) -> List[str]:
		cmd = [self.binary, "key", "inspect", "--scheme", scheme]
		if self.network:
			cmd += ["--network", self.network]
		if self.output_type == "json":
			cmd += ["--output-type", "json"]
		cmd.append(suri)
		return cmd

	def insert_command(self, key_type: str, scheme: str, chain: str, base_path: str, suri: str) -> List[str]:
		return [
			self.binary, "key", "insert",
			f"--chain={chain}",
			"--key-type", key_type,
			"-d", base_path,
			"--scheme", scheme,
			"--suri", suri,
		]

	def _run(self, cmd: List[str], suri: str) -> str:
		hidden = secret_parts(suri)
		shown = [SURI_MASK if arg == suri else arg for arg in cmd]
		logger.debug("Running %s", " ".join(shown))
		try:
			proc = subprocess.run(cmd, capture_output=True, text=True, check=False)
		except OSError as exc:
			raise KeyToolError(f"cannot run key tool {self.binary}: {exc}", command=shown) from exc
		if proc.returncode != 0:
			stderr = mask_secret((proc.stderr or "").strip(), hidden)
			raise KeyToolError(
				f"{' '.join(shown[1:3])} exited with status {proc.returncode}: {stderr}",
				command=shown,
				returncode=proc.returncode,
				stderr=stderr,
			)
		return proc.stdout

	def inspect_key(self, scheme: str, suri: str) -> KeyInfo:
		output = self._run(self.inspect_command(scheme, suri), suri)
		if self.output_type == "json":
			return parse_inspect_json(output)
		return parse_inspect_text(output)

	def insert_key(self, key_type: str, scheme: str, chain: str, base_path: str, suri: str) -> KeyInfo:
		self._run(self.insert_command(key_type, scheme, chain, base_path, suri), suri)
		return self.inspect_key(scheme, suri)

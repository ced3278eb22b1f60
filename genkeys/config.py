import argparse
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from .errors import MissingSecretError


SECRET_ENV = "SECRET"

DEFAULT_BINARY = "../../target/release/chainx"
DEFAULT_CHAIN = "mainnet"
DEFAULT_KEYS_DIR = "keys"


@dataclass
class Settings:
	secret: str
	binary: str = DEFAULT_BINARY
	chain: str = DEFAULT_CHAIN
	keys_dir: str = DEFAULT_KEYS_DIR
	network: Optional[str] = None
	output_type: str = "json"
	referral_name: Optional[str] = None
	json_out: Optional[Path] = None

	def __repr__(self) -> str:
		return f"Settings(binary={self.binary!r}, chain={self.chain!r}, keys_dir={self.keys_dir!r}, secret=<hidden>)"


def load_settings(args: argparse.Namespace, environ: Optional[Mapping[str, str]] = None) -> Settings:
	"""Combine parsed arguments with the root secret from the environment."""
	env = os.environ if environ is None else environ
	secret = env.get(SECRET_ENV, "")
	if not secret:
		raise MissingSecretError(SECRET_ENV)
	return Settings(
		secret=secret,
		binary=args.binary,
		chain=args.chain,
		keys_dir=args.keys_dir,
		network=args.network,
		output_type=args.output_type,
		referral_name=args.referral_name,
		json_out=Path(args.json_out) if args.json_out else None,
	)

import argparse
import logging
import sys
from typing import List, Mapping, Optional, TextIO

from .config import DEFAULT_BINARY, DEFAULT_CHAIN, DEFAULT_KEYS_DIR, load_settings
from .errors import GenesisKeysError
from .generator import GenesisKeyGenerator
from .subkey import OUTPUT_TYPES, KeyBackend, SubprocessKeyBackend
from .summary import write_summary


logger = logging.getLogger(__name__)

REFERRAL_PROMPT = "please input referral_name to be generated"


def build_parser() -> argparse.ArgumentParser:
	parser = argparse.ArgumentParser(
		prog="genesis-keys",
		description="Derive genesis validator and root keys from $SECRET and print them as Rust literals",
	)
	parser.add_argument("--binary", default=DEFAULT_BINARY, help="Node binary providing `key inspect` and `key insert`")
	parser.add_argument("--chain", default=DEFAULT_CHAIN, help="Chain id passed to `key insert`")
	parser.add_argument("--keys-dir", dest="keys_dir", default=DEFAULT_KEYS_DIR, help="Base directory for the generated keystores")
	parser.add_argument("--network", default=None, help="SS58 network used for printed addresses")
	parser.add_argument("--output-type", dest="output_type", choices=OUTPUT_TYPES, default="json", help="How `key inspect` output is read")
	parser.add_argument("--referral-name", dest="referral_name", default=None, help="Referral name prefix (prompted for if omitted)")
	parser.add_argument("--json-out", dest="json_out", default=None, help="Also write the public keys as JSON to this path")
	parser.add_argument("--log-level", dest="log_level", default="WARNING", help="Logging level (DEBUG, INFO, WARNING, ERROR)")
	return parser


def read_referral_name(stdin: TextIO, stderr: TextIO) -> str:
	print(REFERRAL_PROMPT, file=stderr)
	line = stdin.readline()
	if not line:
		raise GenesisKeysError("no referral_name given on standard input")
	return line.strip()


def main(
	argv: Optional[List[str]] = None,
	environ: Optional[Mapping[str, str]] = None,
	backend: Optional[KeyBackend] = None,
	stdin: Optional[TextIO] = None,
	stdout: Optional[TextIO] = None,
	stderr: Optional[TextIO] = None,
) -> int:
	stdin = stdin or sys.stdin
	stdout = stdout or sys.stdout
	stderr = stderr or sys.stderr

	args = build_parser().parse_args(argv)
	logging.basicConfig(
		level=getattr(logging, str(args.log_level).upper(), logging.WARNING),
		format='%(asctime)s - %(levelname)s - %(message)s',
		stream=stderr,
	)

	try:
		settings = load_settings(args, environ)
		if backend is None:
			backend = SubprocessKeyBackend(settings.binary, network=settings.network, output_type=settings.output_type)
		referral_name = settings.referral_name
		if referral_name is None:
			referral_name = read_referral_name(stdin, stderr)

		generator = GenesisKeyGenerator(
			settings.secret,
			backend,
			referral_name,
			keys_dir=settings.keys_dir,
			chain=settings.chain,
		)
		keyset = generator.generate(stdout)

		if settings.json_out:
			summary = write_summary(keyset, settings.json_out)
			logger.info("Wrote %s (keysetHash=%s)", settings.json_out, summary["keysetHash"])
	except GenesisKeysError as exc:
		logger.debug("Aborting", exc_info=True)
		print(f"ERROR: {exc}", file=stderr)
		return 1
	except KeyboardInterrupt:
		print("Interrupted", file=stderr)
		return 130
	return 0


if __name__ == "__main__":
	sys.exit(main())

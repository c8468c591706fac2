"""
CLI entry points for stamping fields onto a PDF.
"""

# Standard Library
import argparse
import json
import pathlib
import sys
import time

# local repo modules
import pdf_field_overlay as pfo
import pdf_field_overlay.audit
import pdf_field_overlay.compositor
import pdf_field_overlay.config
import pdf_field_overlay.errors


CompositeConfig = pfo.config.CompositeConfig
FieldOverlayError = pfo.errors.FieldOverlayError
InvalidInputError = pfo.errors.InvalidInputError

AUDIT_LOG_NAME = pfo.config.AUDIT_LOG_NAME
OUTPUT_PREFIX = pfo.config.OUTPUT_PREFIX
DEFAULT_FONT_REGULAR = pfo.config.DEFAULT_FONT_REGULAR
DEFAULT_TEXT_SIZE = pfo.config.DEFAULT_TEXT_SIZE


#============================================
def build_config(args: argparse.Namespace) -> CompositeConfig:
	"""
	Build compositing config from CLI args.

	Args:
		args: Parsed argparse namespace.

	Returns:
		CompositeConfig.
	"""
	return CompositeConfig(
		font_name=args.font_name,
		font_size=args.font_size,
	)


#============================================
def load_field_records(path: pathlib.Path) -> list:
	"""
	Load field records from a JSON file.

	Accepts either a list of records or an object with a "fields" list.

	Args:
		path: JSON file path.

	Returns:
		List of field records.
	"""
	with path.open("r", encoding="utf-8") as handle:
		payload = json.load(handle)
	if isinstance(payload, dict):
		payload = payload.get("fields")
	if not isinstance(payload, list):
		raise InvalidInputError(f"{path} must hold a list of fields or an object with a 'fields' list")
	return payload


#============================================
def default_output_path(input_path: pathlib.Path) -> pathlib.Path:
	"""
	Build signed_<epoch ms>.pdf beside the input.
	"""
	stamp = time.time_ns() // 1_000_000
	return input_path.parent / f"{OUTPUT_PREFIX}{stamp}.pdf"


#============================================
def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
	"""
	Parse command line arguments.

	Returns:
		Parsed argparse namespace.
	"""
	parser = argparse.ArgumentParser(description="Stamp placed fields onto the first page of a PDF.")
	parser.add_argument("input_path", help="Source PDF.")
	parser.add_argument("-f", "--fields", dest="fields_path", required=True, help="Field records JSON path.")

	output_group = parser.add_argument_group("Output")
	output_group.add_argument("-o", "--output", dest="output_path", default=None, help="Output PDF path.")
	output_group.add_argument("-a", "--audit-log", dest="audit_log_path", default=None, help="Audit log JSON path.")

	text_group = parser.add_argument_group("Text")
	text_group.add_argument("--font", dest="font_name", default=DEFAULT_FONT_REGULAR, help="Standard PDF font name.")
	text_group.add_argument("--font-size", dest="font_size", type=float, default=DEFAULT_TEXT_SIZE, help="Font size in points.")

	behavior_group = parser.add_argument_group("Behavior")
	behavior_group.add_argument("-q", "--quiet", dest="verbose", action="store_false", help="Only print errors.")

	parser.set_defaults(verbose=True)

	args = parser.parse_args(argv)
	return args


#============================================
def run_pipeline(args: argparse.Namespace) -> pfo.audit.AuditRecord:
	"""
	Composite fields onto the input PDF and record the audit entry.

	Args:
		args: Parsed argparse namespace.

	Returns:
		AuditRecord for the run.
	"""
	input_path = pathlib.Path(args.input_path)
	output_path = pathlib.Path(args.output_path) if args.output_path else default_output_path(input_path)
	audit_log_path = pathlib.Path(args.audit_log_path) if args.audit_log_path else output_path.parent / AUDIT_LOG_NAME
	if args.verbose:
		print(f"Input PDF: {input_path}")
		print(f"Fields: {args.fields_path}")
		print(f"Output PDF: {output_path}")
		print(f"Audit log: {audit_log_path}")

	start_time = time.perf_counter()
	source = input_path.read_bytes()
	records = load_field_records(pathlib.Path(args.fields_path))
	if args.verbose:
		print(f"Field records: {len(records)}")

	# refuse a broken log before any output exists
	pfo.audit.read_audit_log(audit_log_path)

	config = build_config(args)
	result = pfo.compositor.composite_records(source, records, config, verbose=args.verbose)
	output_path.write_bytes(result.document)
	try:
		pfo.audit.append_audit_log(audit_log_path, result.audit, output_path.name)
	except (OSError, ValueError):
		output_path.unlink(missing_ok=True)
		raise

	if args.verbose:
		if result.skipped:
			print(f"Skipped fields: {len(result.skipped)}")
		print(f"Timing: total={time.perf_counter() - start_time:.2f}s")
		print(f"Audit entry written: {audit_log_path}")
	return result.audit


#============================================
def main(argv: list[str] | None = None) -> int:
	"""
	Main entry point.
	"""
	args = parse_args(argv)
	try:
		run_pipeline(args)
	except (FieldOverlayError, OSError, ValueError) as error:
		print(f"Error: {error}", file=sys.stderr)
		return 1
	return 0

"""
Content hashes and audit records for compositing runs.
"""

# Standard Library
import dataclasses
import datetime
import hashlib
import json
import pathlib


@dataclasses.dataclass(frozen=True)
class SkippedField:
	field_id: int | str
	field_type: str
	reason: str

	def to_dict(self) -> dict:
		return {"id": self.field_id, "type": self.field_type, "reason": self.reason}


@dataclasses.dataclass(frozen=True)
class AuditRecord:
	original_hash: str
	final_hash: str
	timestamp: str
	field_count: int
	skipped_fields: tuple[SkippedField, ...] = ()

	def to_dict(self) -> dict:
		return {
			"original_hash": self.original_hash,
			"final_hash": self.final_hash,
			"timestamp": self.timestamp,
			"field_count": self.field_count,
			"skipped_fields": [skipped.to_dict() for skipped in self.skipped_fields],
		}


#============================================
def compute_sha256(data: bytes) -> str:
	"""
	Compute SHA256 hash for a byte string.

	Args:
		data: Input bytes.

	Returns:
		Hex digest.
	"""
	hasher = hashlib.sha256()
	hasher.update(data)
	return hasher.hexdigest()


#============================================
def utc_timestamp() -> str:
	"""
	Return the current UTC time in ISO 8601 form.
	"""
	now = datetime.datetime.now(datetime.timezone.utc)
	return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


#============================================
def build_audit_record(
	original: bytes,
	final: bytes,
	field_count: int,
	skipped: list[SkippedField] | tuple[SkippedField, ...] = (),
) -> AuditRecord:
	"""
	Hash the source and output documents of one run.

	Args:
		original: Source document bytes.
		final: Output document bytes.
		field_count: Number of fields submitted.
		skipped: Fields that were left out of the output.

	Returns:
		AuditRecord.
	"""
	return AuditRecord(
		original_hash=compute_sha256(original),
		final_hash=compute_sha256(final),
		timestamp=utc_timestamp(),
		field_count=field_count,
		skipped_fields=tuple(skipped),
	)


#============================================
def read_audit_log(log_path: pathlib.Path) -> list:
	"""
	Read the existing audit entries, or an empty list when there is no log.

	Args:
		log_path: Audit log path.

	Returns:
		List of audit entries.
	"""
	if not log_path.exists():
		return []
	with log_path.open("r", encoding="utf-8") as handle:
		entries = json.load(handle)
	if not isinstance(entries, list):
		raise ValueError(f"audit log is not a JSON list: {log_path}")
	return entries


#============================================
def append_audit_log(
	log_path: pathlib.Path,
	record: AuditRecord,
	file_name: str | None = None,
) -> dict:
	"""
	Append an audit entry to a JSON list on disk.

	Existing entries are never rewritten. A log that does not hold a
	JSON list raises instead of being replaced.

	Args:
		log_path: Audit log path.
		record: Audit record to append.
		file_name: Output document name stored with the entry.

	Returns:
		The entry that was written.
	"""
	entries = read_audit_log(log_path)
	entry = record.to_dict()
	entry["file"] = file_name
	entries.append(entry)
	with log_path.open("w", encoding="utf-8") as handle:
		json.dump(entries, handle, indent=2, sort_keys=True)
	return entry

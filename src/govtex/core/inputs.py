"""Validation and normalization of the documents handed to the diff pipeline."""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Tuple, Union

from govtex.exceptions import InputNotFound, InvalidExtension

STAGE = "resolving"


@dataclass(frozen=True)
class DocumentReference:
    path: Path

    @property
    def name(self) -> str:
        return self.path.name


def resolve_document(path: Union[str, Path], suffix: str = ".tex") -> DocumentReference:
    """Check that ``path`` is an existing ``suffix`` file and return its canonical form."""
    candidate = Path(path).expanduser()
    if not candidate.is_file():
        raise InputNotFound("Input document not found", stage=STAGE, path=candidate)
    if candidate.suffix != suffix:
        raise InvalidExtension(
            f"Input document must be a {suffix} file", stage=STAGE, path=candidate
        )
    return DocumentReference(path=candidate.resolve())


def resolve_inputs(
    old: Union[str, Path],
    new: Union[str, Path],
    suffix: str = ".tex",
) -> Tuple[DocumentReference, DocumentReference]:
    return resolve_document(old, suffix), resolve_document(new, suffix)

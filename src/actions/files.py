"""Save-as primitive writing EML documents to a directory."""

import logging
from pathlib import Path

from src.eml import EmlDocument

logger = logging.getLogger(__name__)


class DirectorySaver:
    """Writes each document into a directory under its suggested name.

    Existing files are never overwritten; a numeric suffix is added
    instead ("Subject_abc.eml" -> "Subject_abc (1).eml"). Files are
    created exclusively, so concurrent savers never clobber each other.
    """

    def __init__(self, output_dir: Path):
        self._output_dir = Path(output_dir)
        self.saved: list[Path] = []

    def _candidates(self, file_name: str):
        stem, suffix = Path(file_name).stem, Path(file_name).suffix
        yield self._output_dir / file_name
        counter = 1
        while True:
            yield self._output_dir / f"{stem} ({counter}){suffix}"
            counter += 1

    def __call__(self, document: EmlDocument) -> None:
        self._output_dir.mkdir(parents=True, exist_ok=True)
        content = document.to_bytes()
        for path in self._candidates(document.file_name):
            try:
                with open(path, "xb") as eml_file:
                    eml_file.write(content)
            except FileExistsError:
                continue
            break
        self.saved.append(path)
        logger.info("Saved email %s to %s", document.record_id, path)

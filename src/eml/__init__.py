"""EML encoder for email records.

Public API:
    - encode: Convert an EmailRecord into an EmlDocument
    - EmlDocument: Encoded MIME text plus suggested file name
    - eml_file_name: File name derivation used by the encoder
"""

from .encoder import encode, eml_file_name
from .models import EmlDocument

__all__ = [
    "encode",
    "eml_file_name",
    "EmlDocument",
]

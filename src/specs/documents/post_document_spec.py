from pydantic import BaseModel, Field
from typing import Any, Dict
from ..common.base_document_spec import BaseDocument
from ..common.datetime_utils import format_iso_datetime

class Author(BaseModel):
	firstName: str = Field(..., min_length=1, description="Author's first name")
	lastName: str = Field(..., min_length=1, description="Author's last name")

	@property
	def display_name(self) -> str:
		return f"{self.firstName} {self.lastName}".strip()

class PostDocument(BaseDocument):
	title: str = Field(..., description="Title of the post")
	content: str = Field(..., description="Free-text body of the post")
	author: Author = Field(..., description="Structured author name")

	@property
	def author_name(self) -> str:
		return self.author.display_name

	def to_item(self) -> Dict[str, Any]:
		"""Cosmos item body; `created` is stored as an ISO-8601 UTC string."""
		item = self.model_dump()
		item["created"] = format_iso_datetime(self.created)
		return item

from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime


class CreateDocumentRequest(BaseModel):
    name: str = Field(..., min_length=1, description="Display name of the document")
    description: Optional[str] = Field(None, description="Document description")
    file_path: str = Field(..., description="Key of the uploaded object in storage")
    file_size: int = Field(0, ge=0, description="Size in bytes")
    file_type: Optional[str] = Field(None, description="MIME type")
    folder_path: str = Field("/", description="Folder the document is placed in")


class UpdateDocumentRequest(BaseModel):
    name: Optional[str] = Field(None, description="Display name of the document")
    description: Optional[str] = Field(None, description="Document description")
    folder_path: Optional[str] = Field(None, description="Move the document to this folder")


class DocumentResponse(BaseModel):
    id: int
    project_id: int
    name: str
    description: Optional[str] = None
    file_path: str
    file_size: int
    file_type: Optional[str] = None
    folder_path: str
    version: int
    uploaded_by: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    model_config = {"from_attributes": True}


class DocumentListResponse(BaseModel):
    documents: List[DocumentResponse]


class DocumentStatsResponse(BaseModel):
    count: int = Field(..., description="Number of documents in the project")
    total_size: int = Field(..., description="Sum of document sizes in bytes")


class DeleteDocumentResponse(BaseModel):
    message: str

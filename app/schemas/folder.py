from __future__ import annotations
from pydantic import BaseModel, Field, field_validator
from typing import Optional, List
from datetime import datetime


class CreateFolderRequest(BaseModel):
    name: str = Field(..., min_length=1, description="The name of the folder")
    path: str = Field(..., description="Folder path, normalized to /a/b/")
    parent_path: str = Field("/", description="Parent folder path, normalized to /a/")
    description: Optional[str] = Field(None, description="Folder description")


class CreateMultipleFoldersRequest(BaseModel):
    folders: List[CreateFolderRequest] = Field(..., description="Folders to create")


class FolderSuggestion(BaseModel):
    path: str = Field(..., min_length=1, description="Suggested folder path")
    description: Optional[str] = Field(None, description="Why the folder is suggested")


class ImportFolderSuggestionsRequest(BaseModel):
    folders: List[FolderSuggestion] = Field(..., description="Suggested folders to import")


class SuggestFolderStructureRequest(BaseModel):
    project_type: str = Field(..., min_length=1, description="Kind of construction project")
    project_description: Optional[str] = Field(None, description="Free text project description")
    custom_requirements: Optional[str] = Field(None, description="Extra requirements for the structure")


class SuggestFolderStructureResponse(BaseModel):
    folders: List[FolderSuggestion] = []
    explanation: Optional[str] = None


class RenameFolderRequest(BaseModel):
    path: str = Field(..., description="Current path of the folder")
    new_name: str = Field(..., min_length=1, description="New folder name")

    @field_validator("new_name")
    @classmethod
    def name_is_single_segment(cls, value: str) -> str:
        if "/" in value:
            raise ValueError("Folder name cannot contain '/'")
        return value


class UpdateFolderRequest(BaseModel):
    name: Optional[str] = Field(None, description="The name of the folder")
    description: Optional[str] = Field(None, description="Folder description")


class FolderResponse(BaseModel):
    id: int = Field(..., description="The id of the folder")
    project_id: int = Field(..., description="The project id")
    name: str = Field(..., description="The name of the folder")
    path: str = Field(..., description="Absolute folder path")
    parent_path: str = Field(..., description="Absolute parent folder path")
    description: Optional[str] = Field(None, description="Folder description")
    created_by: Optional[int] = Field(None, description="The user id who created the folder")
    created_at: Optional[datetime] = Field(None, description="The creation time of the folder")
    updated_at: Optional[datetime] = Field(None, description="The update time of the folder")
    model_config = {"from_attributes": True}


class DeleteFolderResponse(BaseModel):
    message: str = Field(..., description="Status message confirming deletion")
    path: str = Field(..., description="Path of the deleted folder")


class FolderPathsResponse(BaseModel):
    paths: List[str] = Field(..., description="Every known folder path, sorted")


class FolderTreeNode(BaseModel):
    name: str
    path: str
    children: List[FolderTreeNode] = []
    file_count: int = 0


class FolderTreeResponse(BaseModel):
    project_id: int
    tree: FolderTreeNode

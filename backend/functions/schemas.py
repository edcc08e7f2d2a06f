from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

THUMBDATA_SUFFIX = ".thumbdata"
IMAGE_EXTENSIONS = (".png", ".jpg", ".jpeg", ".webp")


# Payload of a storage object finalize/update notification
class StorageObjectEvent(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    bucket: str = ""
    name: str = ""
    metageneration: str = "1"
    resource_state: str = Field("exists", alias="resourceState")
    content_type: Optional[str] = Field(None, alias="contentType")

    @field_validator("metageneration", mode="before")
    @classmethod
    def _metageneration_as_str(cls, value):
        return "1" if value is None else str(value)

    def skip_reason(self) -> Optional[str]:
        """Why this event produces no thumbnail, or None when it should be processed."""
        if not self.bucket or not self.name:
            return "event has no bucket or object name"
        if self.resource_state == "not_exists":
            return f"File {self.name} deleted."
        if self.metageneration != "1":
            return f"File {self.name} metadata updated."
        if self.name.endswith(THUMBDATA_SUFFIX):
            return f"Skipping thumbnail data: {self.name}"
        if not self.looks_like_image():
            return f"File {self.name} is not an image ({self.content_type})."
        return None

    def looks_like_image(self) -> bool:
        # Either an image extension or an image content type is enough
        if self.name.lower().endswith(IMAGE_EXTENSIONS):
            return True
        return not self.content_type or self.content_type.startswith("image/")


class PipelineConfig(BaseModel):
    output_bucket: str = Field(..., min_length=1)
    pixel_budget: int = Field(2500, gt=0)
    dominant_color_enabled: bool = True
    timeout: float = Field(60.0, gt=0)

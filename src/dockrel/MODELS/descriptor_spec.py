"""
Model of a rendered Dockerfile, one field per output line.
"""
from pydantic import BaseModel, ConfigDict


class DescriptorSpec(BaseModel):
    """
    The six Dockerfile sections, already normalized into full instruction lines.
    Sections that were not configured hold an empty string.
    """
    model_config = ConfigDict(frozen=True)

    base_image: str
    maintainer: str = ""
    pre_copy: str = ""
    copy_instruction: str
    post_copy: str = ""
    entrypoint: str

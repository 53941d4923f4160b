from pydantic import BaseModel, Field


class EmbedField(BaseModel):
    name: str
    value: str
    inline: bool | None = None


class EmbedFooter(BaseModel):
    text: str


class Embed(BaseModel):
    title: str | None = None
    description: str | None = None
    color: int | None = Field(default=None, ge=0, le=0xFFFFFF)  # 24-bit RGB
    fields: list[EmbedField] | None = None
    footer: EmbedFooter | None = None


class Attachment(BaseModel):
    id: int  # matches the files[<id>] multipart part
    filename: str
    description: str | None = None


class DiscordMessage(BaseModel):
    content: str | None = None
    embeds: list[Embed] = Field(default_factory=list)
    attachments: list[Attachment] = Field(default_factory=list)

    def to_json(self) -> str:
        """Wire form: unset and empty values are left out."""
        return self.model_dump_json(exclude_none=True, exclude_defaults=True)

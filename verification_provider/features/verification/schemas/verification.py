from pydantic import BaseModel, ConfigDict, Field, field_validator

from verification_provider.platform.schemas import APIResponse


class VerificationRequest(BaseModel):
    """Inbound queue message asking for a code to be sent to `email`."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    email: str = Field(alias="Email", min_length=1)

    @field_validator("email")
    @classmethod
    def email_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Email must not be empty")
        return value


class ValidateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    email: str = Field(alias="Email", min_length=1)
    code: str = Field(alias="Code", min_length=1)


class EmailRequest(BaseModel):
    """Outbound message consumed by the email sender."""

    model_config = ConfigDict(populate_by_name=True)

    to: str = Field(alias="To", min_length=1)
    subject: str = Field(alias="Subject")
    html_body: str = Field(alias="HtmlBody")
    plain_text: str = Field(alias="PlainText")


class ValidationResult(BaseModel):
    valid: bool


class ValidateCodeResponse(APIResponse[ValidationResult]):
    pass

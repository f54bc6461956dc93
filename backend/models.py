from enum import Enum, IntEnum
from typing import Annotated, Optional

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field


class ClncFlag(IntEnum):
    UNREVIEWED = 0
    HELD = 1
    REVIEWED = 2

    @property
    def label(self) -> str:
        return {
            ClncFlag.UNREVIEWED: "Unreviewed",
            ClncFlag.HELD: "Held",
            ClncFlag.REVIEWED: "Reviewed",
        }[self]


class PortalView(str, Enum):
    AUTH = "auth"
    ADMIN = "admin"
    PATIENTS = "patients"


# The backend sends null for unset text fields.
NullableStr = Annotated[str, BeforeValidator(lambda value: "" if value is None else value)]


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True, coerce_numbers_to_str=True)


class Identity(_CamelModel):
    user_id: str = Field(alias="userId")
    user_name: Optional[str] = Field(default=None, alias="userName")
    token: str = ""
    dept_code: Optional[str] = Field(default=None, alias="deptCode")
    is_admin: bool = Field(default=False, alias="isAdmin")

    @property
    def display_name(self) -> str:
        return self.user_name or self.user_id


class AdminSettings(_CamelModel):
    third_party_auth_url: NullableStr = Field(default="", alias="thirdPartyAuthUrl")
    client_id: NullableStr = Field(default="", alias="clientId")
    client_secret: NullableStr = Field(default="", alias="clientSecret")
    utilization_service_no: NullableStr = Field(default="", alias="utilizationServiceNo")
    institution_code: NullableStr = Field(default="", alias="institutionCode")
    seed_key: NullableStr = Field(default="", alias="seedKey")

    def value_for(self, key: str) -> str:
        """Look a setting up by its wire name (e.g. ``clientSecret``)."""
        for name, field in type(self).model_fields.items():
            if field.alias == key:
                return getattr(self, name) or ""
        raise KeyError(key)


class PatientInfo(_CamelModel):
    pat_id: str = Field(alias="patId")
    pat_name: NullableStr = Field(default="", alias="patName")
    age: Optional[int] = None
    dept_code: NullableStr = Field(default="", alias="deptCode")
    prsn_id_pre: NullableStr = Field(default="", alias="prsnIdPre")
    clnc_cnfrm_flag: ClncFlag = Field(default=ClncFlag.UNREVIEWED, alias="clncCnfrmFlag")
    jumin_num: NullableStr = Field(default="", alias="juminNum")
    encrypted_resident_number: NullableStr = Field(default="", alias="encryptedResidentNumber")


class WebViewerRequest(_CamelModel):
    third_party_user_id: str = Field(alias="thirdPartyUserId")
    patient_id: str = Field(alias="patientId")
    dept_code: str = Field(alias="deptCode")
    resident_number: str = Field(alias="residentNumber")
    third_party_institution_type: str = Field(alias="thirdPartyInstitutionType")
    dev_mode: str = Field(alias="devMode")

    def to_wire(self) -> dict:
        return self.model_dump(by_alias=True)


class SettingField(BaseModel):
    key: str
    label: str
    endpoint: str
    request_field: str


SETTING_FIELDS: list[SettingField] = [
    SettingField(key="thirdPartyAuthUrl", label="API URL", endpoint="url", request_field="url"),
    SettingField(key="clientId", label="Client ID", endpoint="client-id", request_field="clientId"),
    SettingField(
        key="clientSecret", label="Client Secret", endpoint="client-secret", request_field="clientSecret"
    ),
    SettingField(
        key="utilizationServiceNo",
        label="Utilization Service No",
        endpoint="utilization-service-no",
        request_field="utilizationServiceNo",
    ),
    SettingField(
        key="institutionCode", label="Institution Code", endpoint="institution-code", request_field="institutionCode"
    ),
    SettingField(key="seedKey", label="Seed Key", endpoint="seed-key", request_field="seedKey"),
]

SETTING_FIELDS_BY_KEY: dict[str, SettingField] = {field.key: field for field in SETTING_FIELDS}

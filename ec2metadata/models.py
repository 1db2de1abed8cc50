from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

IAM_INFO_SUCCESS = "Success"


class MetadataModel(BaseModel):
    """Base for records decoded from metadata service responses.

    A JSON `null` leaves a field at its default instead of failing validation.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    @field_validator("*", mode="before")
    @classmethod
    def null_to_default(cls, v: Any, info: ValidationInfo) -> Any:
        if v is None:
            return cls.model_fields[info.field_name].get_default()
        return v


class EC2IAMInfo(MetadataModel):
    """Represents the IAM info of an instance.

    In our case: http://169.254.169.254/latest/meta-data/iam/info

    See: https://docs.aws.amazon.com/AWSEC2/latest/UserGuide/instancedata-data-categories.html
    """

    code: str = Field("", alias="Code")
    last_updated: Optional[datetime] = Field(None, alias="LastUpdated")
    instance_profile_arn: str = Field("", alias="InstanceProfileArn")
    instance_profile_id: str = Field("", alias="InstanceProfileId")

    @property
    def ok(self) -> bool:
        return self.code == IAM_INFO_SUCCESS


class EC2InstanceIdentityDocument(MetadataModel):
    """Represents the identity document of an instance.

    In our case: http://169.254.169.254/latest/dynamic/instance-identity/document

    See: https://docs.aws.amazon.com/AWSEC2/latest/UserGuide/instance-identity-documents.html
    """

    # IMDS sends null for lists that don't apply to the instance
    devpay_product_codes: Optional[list[str]] = Field(None, alias="devpayProductCodes")
    marketplace_product_codes: Optional[list[str]] = Field(
        None, alias="marketplaceProductCodes"
    )
    billing_products: Optional[list[str]] = Field(None, alias="billingProducts")
    availability_zone: str = Field("", alias="availabilityZone")
    private_ip: str = Field("", alias="privateIp")
    version: str = ""
    region: str = ""
    instance_id: str = Field("", alias="instanceId")
    instance_type: str = Field("", alias="instanceType")
    account_id: str = Field("", alias="accountId")
    pending_time: Optional[datetime] = Field(None, alias="pendingTime")
    image_id: str = Field("", alias="imageId")
    kernel_id: Optional[str] = Field(None, alias="kernelId")
    ramdisk_id: Optional[str] = Field(None, alias="ramdiskId")
    architecture: str = ""

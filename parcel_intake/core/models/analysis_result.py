"""
AIAnalysisResult model for the parcel quality report returned by the AI reviewer.
"""

from pydantic import BaseModel, Field, field_validator


class ParcelCorrection(BaseModel):
    """
    One flagged parcel in an AI report.

    Attributes:
        id: Parcel id the correction applies to
        issue: Human-readable description of the problem
        suggested_address: Replacement address, if the reviewer proposes one
    """

    id: str
    issue: str = ""
    suggested_address: str | None = Field(None, alias="suggestedAddress")

    class Config:
        populate_by_name = True

    @field_validator("issue", mode="before")
    @classmethod
    def null_issue_to_empty(cls, v):
        """The reviewer may send null for an omitted issue."""
        return "" if v is None else v


class AIAnalysisResult(BaseModel):
    """
    Outcome of an AI review over the full parcel list.

    Accepts both snake_case and the camelCase keys emitted by the model
    (``correctedParcels``, ``suggestedAddress``).

    Attributes:
        summary: Short narrative of the review
        recommendations: Operator-facing suggestions
        corrected_parcels: Sparse list of per-parcel corrections
    """

    summary: str
    recommendations: list[str] = Field(default_factory=list)
    corrected_parcels: list[ParcelCorrection] = Field(default_factory=list, alias="correctedParcels")

    class Config:
        populate_by_name = True
        json_schema_extra = {
            "example": {
                "summary": "2 parcels have incomplete addresses.",
                "recommendations": ["Confirm house numbers before dispatch"],
                "correctedParcels": [
                    {
                        "id": "0b6f7c1e-5d7e-4bb3-9d8e-0c8a1c7f2a10",
                        "issue": "Address lacks area name",
                        "suggestedAddress": "House 12, Road 5, Dhanmondi, Dhaka",
                    }
                ],
            }
        }

    @field_validator("recommendations", "corrected_parcels", mode="before")
    @classmethod
    def null_list_to_empty(cls, v):
        return [] if v is None else v

    def correction_for(self, parcel_id: str) -> ParcelCorrection | None:
        """Return the first correction for ``parcel_id``, if any."""
        for correction in self.corrected_parcels:
            if correction.id == parcel_id:
                return correction
        return None

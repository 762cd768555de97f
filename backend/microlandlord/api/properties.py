import csv
import io
from typing import Iterable

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from microlandlord.api.dependencies import get_account_id, get_resolver
from microlandlord.core.db import get_db
from microlandlord.crud.properties import create_property, deactivate_property, list_properties
from microlandlord.entitlements.enforcement import require_feature
from microlandlord.entitlements.resolver import EntitlementResolver
from microlandlord.models.properties import Property
from microlandlord.schemas.properties import PropertyCreate, PropertyRead


router = APIRouter(prefix="/properties", tags=["properties"])


@router.get("", response_model=list[PropertyRead])
def read_properties(
    account_id: str = Depends(get_account_id),
    db: Session = Depends(get_db),
):
    return list_properties(db, account_id)


@router.post("", response_model=PropertyRead, status_code=status.HTTP_201_CREATED)
def add_property(
    payload: PropertyCreate,
    account_id: str = Depends(get_account_id),
    db: Session = Depends(get_db),
    resolver: EntitlementResolver = Depends(get_resolver),
):
    return create_property(
        db,
        resolver,
        account_id,
        name=payload.name,
        address=payload.address,
        property_type=payload.type,
        description=payload.description,
    )


@router.delete("/{property_id}", response_model=PropertyRead)
def remove_property(
    property_id: int,
    account_id: str = Depends(get_account_id),
    db: Session = Depends(get_db),
):
    prop = deactivate_property(db, account_id, property_id)
    if not prop:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Property not found")
    return prop


def _build_export_csv(properties: Iterable[Property]) -> str:
    output = io.StringIO()
    writer = csv.writer(output)
    writer.writerow(["id", "name", "address", "type", "description", "is_active", "created_at"])
    for prop in properties:
        writer.writerow(
            [
                prop.id,
                prop.name,
                prop.address,
                prop.type,
                prop.description or "",
                "true" if prop.is_active else "false",
                prop.created_at.isoformat() if prop.created_at else "",
            ]
        )
    return output.getvalue()


@router.get("/export")
def export_properties(
    include_inactive: bool = False,
    account_id: str = Depends(get_account_id),
    db: Session = Depends(get_db),
    resolver: EntitlementResolver = Depends(get_resolver),
):
    require_feature(resolver, account_id, "export_properties", message="Property exports require a paid plan")
    properties = list_properties(db, account_id, include_inactive=include_inactive)
    return Response(
        content=_build_export_csv(properties),
        media_type="text/csv",
        headers={"Content-Disposition": "attachment; filename=properties.csv"},
    )

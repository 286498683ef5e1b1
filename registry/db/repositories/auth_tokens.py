"""
Repository for auth tokens.

Implements create/read/delete plus issuance with a generated id.
"""
from __future__ import annotations

import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from registry.db import models, schemas
from registry.db.errors import require, storage_errors
from registry.utils import token_ids

logger = logging.getLogger(__name__)


def create_auth_token(db: Session, token: schemas.AuthTokenCreate) -> models.AuthToken:
    db_token = models.AuthToken(
        id=token.id,
        author=token.author,
        access_token=token.access_token,
    )
    with storage_errors(db, f"create auth token for {token.author}"):
        db.add(db_token)
        db.commit()
        db.refresh(db_token)
    logger.info(f"Auth token created for author {db_token.author}")
    return db_token


def issue_auth_token(db: Session, *, author: str, access_token: str) -> models.AuthToken:
    """Create a token under a freshly generated id."""
    payload = schemas.AuthTokenCreate(
        id=token_ids.generate_token_id(),
        author=author,
        access_token=access_token,
    )
    return create_auth_token(db, payload)


def read_auth_token_opt(db: Session, token_id: str) -> Optional[models.AuthToken]:
    with storage_errors(db, "read auth token"):
        return db.get(models.AuthToken, token_id)


def read_auth_token(db: Session, token_id: str) -> models.AuthToken:
    return require(read_auth_token_opt(db, token_id), "AuthToken", token_id)


def list_auth_tokens(db: Session, *, author: str) -> List[models.AuthToken]:
    with storage_errors(db, f"list auth tokens for {author}"):
        return (
            db.query(models.AuthToken)
            .filter(models.AuthToken.author == author)
            .order_by(models.AuthToken.id.asc())
            .all()
        )


def delete_auth_token(db: Session, token_id: str) -> int:
    """Delete a token by id; deleting a missing id affects zero rows."""
    with storage_errors(db, "delete auth token"):
        deleted = (
            db.query(models.AuthToken)
            .filter(models.AuthToken.id == token_id)
            .delete(synchronize_session="fetch")
        )
        db.commit()
    if deleted:
        logger.info("Auth token revoked")
    return deleted

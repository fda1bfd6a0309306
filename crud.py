from sqlalchemy.orm import Session
from models import Image


def create_image(db: Session, title: str, image_path: str) -> Image:
    db_img = Image(
        title=title,
        image_path=image_path
    )
    db.add(db_img)
    try:
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(db_img)
    return db_img


def list_images(db: Session):
    return db.query(Image).order_by(Image.created_at.desc()).all()


def delete_image(db: Session, db_img: Image):
    db.delete(db_img)
    try:
        db.commit()
    except Exception:
        db.rollback()
        raise

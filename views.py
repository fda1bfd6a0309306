"""Server-rendered upload and gallery pages."""
import logging
from html import escape

from fastapi import APIRouter, Depends
from fastapi.responses import HTMLResponse, RedirectResponse
from sqlalchemy.orm import Session

import crud
from database import get_db
from schemas import ImageOut

logger = logging.getLogger(__name__)

router = APIRouter(tags=["pages"])

UPLOAD_PAGE = "/pages/upload"
GALLERY_PAGE = "/pages/gallery"

BASE_CSS = """
*{box-sizing:border-box}
body{margin:0;font-family:system-ui,-apple-system,Segoe UI,Roboto,sans-serif;background:#f9fafb;color:#1f2937}
.wrap{max-width:72rem;margin:0 auto;padding:3rem 1rem}
.panel{background:#fff;border-radius:.5rem;box-shadow:0 4px 12px rgba(0,0,0,.08);padding:2rem}
h1{font-size:1.875rem;margin:0 0 1.5rem}
.btn{display:inline-block;border:0;border-radius:.5rem;padding:.6rem 1.5rem;font-weight:600;cursor:pointer;text-decoration:none;background:#4f46e5;color:#fff}
.btn:disabled{background:#9ca3af;cursor:not-allowed}
.tabs{display:flex;gap:1rem;margin-bottom:1.5rem}
.tabs .btn{flex:1;text-align:center}
.tabs .off{background:#e5e7eb;color:#374151}
.grid{display:grid;grid-template-columns:1fr;gap:1.5rem}
@media (min-width:768px){.grid{grid-template-columns:repeat(2,1fr)}}
@media (min-width:1024px){.grid.wide{grid-template-columns:repeat(3,1fr)}}
.card{background:#fff;border-radius:.5rem;box-shadow:0 2px 6px rgba(0,0,0,.1);overflow:hidden}
.card img{display:block;width:100%;height:16rem;object-fit:cover}
.card .meta{padding:1rem}
.card h3{margin:0 0 .5rem;font-size:1.125rem}
.card p{margin:0;font-size:.875rem;color:#6b7280}
.empty{text-align:center;padding:3rem 0;color:#4b5563}
"""


def _html_page(title: str, body: str, status_code: int = 200) -> HTMLResponse:
    content = (
        "<!doctype html><html lang=\"en\"><head><meta charset=\"utf-8\">"
        "<meta name=\"viewport\" content=\"width=device-width,initial-scale=1\">"
        f"<title>{escape(title)}</title><style>{BASE_CSS}</style></head>"
        f"<body>{body}</body></html>"
    )
    return HTMLResponse(content=content, status_code=status_code, media_type="text/html; charset=utf-8")


def _card(item: ImageOut) -> str:
    title = escape(item.title)
    return (
        "<div class=\"card\">"
        f"<img src=\"{escape(item.image_path)}\" alt=\"{title}\" loading=\"lazy\">"
        f"<div class=\"meta\"><h3>{title}</h3>"
        f"<p>{item.created_at.strftime('%Y-%m-%d')}</p></div>"
        "</div>"
    )


def render_gallery(items) -> str:
    if not items:
        grid = (
            "<div class=\"empty\"><p>No images uploaded yet</p>"
            f"<a href=\"{UPLOAD_PAGE}\">Upload your first image</a></div>"
        )
    else:
        grid = "<div class=\"grid wide\">" + "".join(_card(i) for i in items) + "</div>"
    return (
        "<div class=\"wrap\">"
        "<div style=\"display:flex;justify-content:space-between;align-items:center;margin-bottom:2rem\">"
        f"<h1 style=\"margin:0\">Image Gallery</h1><a class=\"btn\" href=\"{UPLOAD_PAGE}\">Upload New</a>"
        f"</div>{grid}</div>"
    )


# idle -> uploading -> success | error, then back to idle.
# After a successful upload the recent list is fetched again from /api/images.
UPLOAD_SCRIPT = """
const form = document.getElementById('upload-form');
const titleInput = document.getElementById('title');
const fileInput = document.getElementById('image');
const button = document.getElementById('submit');
const status = document.getElementById('status');
const preview = document.getElementById('preview');
const recent = document.getElementById('recent');
let state = 'idle';

function esc(s) {
  const d = document.createElement('div');
  d.textContent = s;
  return d.innerHTML;
}

function render() {
  button.disabled = state === 'uploading' || !titleInput.value || !fileInput.files.length;
  button.textContent = state === 'uploading' ? 'Uploading...' : state === 'success' ? '\\u2713 Uploaded!' : 'Upload';
}

async function refreshRecent() {
  let data;
  try {
    const res = await fetch('/api/images');
    if (!res.ok) return;
    data = await res.json();
  } catch (err) {
    console.error('Could not load recent uploads:', err);
    return;
  }
  recent.innerHTML = data.images.length === 0
    ? '<div class="empty">No images uploaded yet</div>'
    : data.images.map(img =>
        '<div class="card"><img src="' + esc(img.imagePath) + '" alt="' + esc(img.title) + '">' +
        '<div class="meta"><h3>' + esc(img.title) + '</h3></div></div>').join('');
}

titleInput.addEventListener('input', render);
fileInput.addEventListener('change', () => {
  const file = fileInput.files[0];
  preview.innerHTML = file ? '<img src="' + URL.createObjectURL(file) + '" alt="Preview" style="max-width:100%;height:16rem;object-fit:cover">' : '';
  render();
});

form.addEventListener('submit', async (e) => {
  e.preventDefault();
  if (!titleInput.value || !fileInput.files.length) {
    status.textContent = 'Please provide both title and image';
    return;
  }
  state = 'uploading';
  status.textContent = '';
  render();
  try {
    const body = new FormData();
    body.append('title', titleInput.value);
    body.append('image', fileInput.files[0]);
    const res = await fetch('/api/images', {method: 'POST', body});
    const data = await res.json().catch(() => ({error: res.statusText}));
    if (!res.ok) throw new Error(data.error || 'Upload failed');
    state = 'success';
    form.reset();
    preview.innerHTML = '';
    status.textContent = 'Image uploaded successfully!';
  } catch (err) {
    state = 'error';
    status.textContent = 'Failed to upload image: ' + (err.message || 'Unknown error');
    state = 'idle';
    render();
    return;
  }
  render();
  setTimeout(() => { state = 'idle'; status.textContent = ''; render(); }, 2000);
  await refreshRecent();
});

render();
refreshRecent();
"""


def render_upload() -> str:
    return (
        "<div class=\"wrap\" style=\"max-width:56rem\"><div class=\"panel\">"
        "<div class=\"tabs\">"
        "<span class=\"btn\">Upload Image</span>"
        f"<a class=\"btn off\" href=\"{GALLERY_PAGE}\">View Gallery</a>"
        "</div>"
        "<h1>Upload Image</h1>"
        "<form id=\"upload-form\" enctype=\"multipart/form-data\">"
        "<p><label for=\"title\">Title</label><br>"
        "<input id=\"title\" name=\"title\" type=\"text\" placeholder=\"Enter image title\" style=\"width:100%;padding:.5rem\"></p>"
        "<p><label for=\"image\">Image</label><br>"
        "<input id=\"image\" name=\"image\" type=\"file\" accept=\"image/*\"></p>"
        "<div id=\"preview\"></div>"
        "<p><button id=\"submit\" class=\"btn\" type=\"submit\" style=\"width:100%\">Upload</button></p>"
        "<p id=\"status\" role=\"status\"></p>"
        "</form>"
        "<h2>Recent uploads</h2><div id=\"recent\" class=\"grid\"></div>"
        f"</div></div><script>{UPLOAD_SCRIPT}</script>"
    )


@router.get(UPLOAD_PAGE, response_class=HTMLResponse)
def upload_page():
    return _html_page("Upload Image", render_upload())


@router.get(GALLERY_PAGE, response_class=HTMLResponse)
def gallery_page(db: Session = Depends(get_db)):
    try:
        items = [ImageOut.model_validate(img) for img in crud.list_images(db)]
    except Exception:
        logger.exception("Unexpected server error in GET /pages/gallery")
        body = (
            "<div class=\"wrap\"><h1>Image Gallery</h1>"
            "<div class=\"empty\"><p>Failed to fetch images</p></div></div>"
        )
        return _html_page("Image Gallery", body, status_code=500)
    return _html_page("Image Gallery", render_gallery(items))


@router.get("/upload", include_in_schema=False)
def upload_alias():
    return RedirectResponse(UPLOAD_PAGE)


@router.get("/gallery", include_in_schema=False)
def gallery_alias():
    return RedirectResponse(GALLERY_PAGE)

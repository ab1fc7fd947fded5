"""Admin moderation endpoints and review page."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse

from film_gallery.api.auth import require_admin
from film_gallery.api.schemas import ReviewRequest, success_response
from film_gallery.domain.models import Actor  # noqa: TC001
from film_gallery.domain.resources import ResourceType

if TYPE_CHECKING:
    from film_gallery.containers import AppContainer

router = APIRouter(prefix="/moderation", tags=["moderation"])


@router.get("/pending", dependencies=[Depends(require_admin)])
async def list_pending(request: Request) -> dict[str, object]:
    """Return pending submissions grouped by resource type."""
    container: AppContainer = request.app.state.container
    return container.review_service.list_pending()


@router.post("/{resource_type}/{submission_id}")
async def review_submission(
    resource_type: ResourceType,
    submission_id: str,
    body: ReviewRequest,
    request: Request,
    reviewer: Actor = Depends(require_admin),
) -> dict[str, object]:
    """Approve or reject a pending submission."""
    container: AppContainer = request.app.state.container
    result = await container.moderation_service.review(
        submission_id,
        reviewer,
        body.action,
        edited_fields=body.edited_data,
        resource_type=resource_type,
    )
    return success_response(
        result.message,
        {
            "submission_id": result.submission.id,
            "status": result.submission.status.value,
        },
    )


@router.get("/ui", response_class=HTMLResponse)
async def moderation_ui() -> HTMLResponse:
    """Minimal review page that consumes the moderation API."""
    return HTMLResponse(_MODERATION_UI_HTML)


_MODERATION_UI_HTML = """<!doctype html>
<html lang="en">
  <head>
    <meta charset="utf-8" />
    <meta name="viewport" content="width=device-width, initial-scale=1" />
    <title>Catalog Moderation</title>
    <style>
      body { font-family: ui-sans-serif, system-ui, sans-serif; margin: 2rem; }
      h1 { margin-bottom: 0.5rem; }
      .row { margin-bottom: 1rem; }
      input { padding: 0.4rem 0.6rem; width: 320px; }
      button { padding: 0.4rem 0.8rem; margin-right: 0.5rem; }
      .item { border: 1px solid #ddd; padding: 1rem; margin-bottom: 1rem; }
      .changed { color: #b45309; }
      img { max-width: 200px; display: block; margin: 0.5rem 0; }
    </style>
  </head>
  <body>
    <h1>Catalog Moderation</h1>
    <div class="row">
      <label>Access token</label><br />
      <input id="token" type="password" placeholder="Bearer token" />
      <button onclick="loadQueue()">Load pending</button>
    </div>
    <div id="queue">Ready.</div>
    <script>
      function headers() {
        const token = document.getElementById('token').value;
        return {
          'Authorization': 'Bearer ' + token,
          'Content-Type': 'application/json'
        };
      }

      function renderItem(type, item) {
        const div = document.createElement('div');
        div.className = 'item';
        const title = document.createElement('strong');
        title.textContent = [item.brand, item.name].filter(Boolean).join(' ')
          + ' by ' + item.submitter.username
          + ' (' + item.changes_count + ' changes)';
        div.appendChild(title);
        if (item.proposed_image) {
          const img = document.createElement('img');
          img.src = item.proposed_image;
          div.appendChild(img);
        }
        const list = document.createElement('ul');
        for (const [key, value] of Object.entries(item.proposed_data)) {
          const li = document.createElement('li');
          if (item.changed_fields.includes(key)) li.className = 'changed';
          li.textContent = key + ': ' + item.original_data[key] + ' -> ' + value;
          list.appendChild(li);
        }
        div.appendChild(list);
        for (const action of ['approve', 'reject']) {
          const button = document.createElement('button');
          button.textContent = action;
          button.onclick = () => review(type, item.submission_id, action);
          div.appendChild(button);
        }
        return div;
      }

      async function loadQueue() {
        const queue = document.getElementById('queue');
        queue.textContent = 'Loading...';
        const res = await fetch('/moderation/pending', { headers: headers() });
        const data = await res.json();
        if (!res.ok) {
          queue.textContent = 'Error: ' + (data.error || res.status);
          return;
        }
        queue.textContent = data.total + ' pending';
        for (const item of data.cameras) queue.appendChild(renderItem('camera', item));
        for (const item of data.film_stocks) queue.appendChild(renderItem('filmstock', item));
      }

      async function review(type, submissionId, action) {
        const res = await fetch('/moderation/' + type + '/' + submissionId, {
          method: 'POST',
          headers: headers(),
          body: JSON.stringify({ action })
        });
        const data = await res.json();
        alert(data.success ? data.message : data.error);
        await loadQueue();
      }
    </script>
  </body>
</html>
"""

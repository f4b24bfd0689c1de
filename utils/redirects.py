"""Redirect target selection after a record is deleted."""
from typing import Optional


def resolve_delete_redirect(origin: Optional[str], record_id: str, listing_path: str) -> str:
    """
    Picks where to send the user once `record_id` has been deleted.

    Goes back to the originating location unless it mentions the deleted id
    (most likely the now-gone detail page), in which case the listing page is
    used. The check is a plain substring match, so an id that happens to
    appear inside an unrelated path segment also falls back to the listing.
    """
    redirect_path = origin or listing_path
    if record_id in redirect_path:
        return listing_path
    return redirect_path

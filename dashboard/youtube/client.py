"""YouTube Data API v3 client for channel video discovery."""

from typing import Any, Iterable

import httpx

# Upper bound on ids per videos.list call
VIDEOS_BATCH_SIZE = 50


class YouTubeClient:
    """Client for interacting with YouTube Data API v3 using an API key.

    Every method opens a short-lived ``httpx.AsyncClient``; calls made from
    separate coroutines can run concurrently.
    """

    BASE = "https://www.googleapis.com/youtube/v3"

    def __init__(self, api_key: str, timeout: float = 15):
        """Initialize the YouTube client.

        Args:
            api_key: YouTube Data API key
            timeout: Per-request timeout in seconds
        """
        self._api_key = api_key
        self._timeout = timeout

    async def _get(self, resource: str, params: dict[str, Any]) -> dict[str, Any]:
        """Issue a GET against an API resource and return the decoded body.

        Raises:
            PermissionError: If the key is rejected or the quota is exhausted
            httpx.HTTPStatusError: For other HTTP errors
        """
        async with httpx.AsyncClient(timeout=self._timeout) as client:
            r = await client.get(
                f"{self.BASE}/{resource}", params={**params, "key": self._api_key}
            )

            # Bad keys come back as 400, exhausted quota as 403
            if r.status_code in (400, 401, 403):
                raise PermissionError("YouTube API key rejected or quota exceeded")

            r.raise_for_status()
            return r.json()

    async def get_channel(self, channel_id: str) -> dict[str, Any] | None:
        """Fetch a channel resource.

        Returns:
            The raw channel item, or None if the channel does not exist
        """
        data = await self._get(
            "channels",
            {
                "part": "snippet,statistics,contentDetails,brandingSettings",
                "id": channel_id,
            },
        )
        items = data.get("items") or []
        return items[0] if items else None

    async def get_uploads_playlist_id(self, channel_id: str) -> str | None:
        """Resolve the channel's uploads playlist id.

        Returns:
            The playlist id, or None if the channel or playlist is missing
        """
        channel = await self.get_channel(channel_id)
        if channel is None:
            return None
        related = channel.get("contentDetails", {}).get("relatedPlaylists", {})
        return related.get("uploads") or None

    async def list_playlist_video_ids(
        self, playlist_id: str, max_results: int = 50
    ) -> list[str]:
        """List video ids from the first page of a playlist."""
        data = await self._get(
            "playlistItems",
            {"part": "snippet", "playlistId": playlist_id, "maxResults": max_results},
        )

        ids = []
        for it in data.get("items", []):
            video_id = it.get("snippet", {}).get("resourceId", {}).get("videoId")
            if video_id:
                ids.append(video_id)
        return ids

    async def search_event_video_ids(
        self, channel_id: str, event_type: str, max_results: int = 10
    ) -> list[str]:
        """Search a channel's videos by broadcast event type.

        Args:
            channel_id: YouTube channel ID
            event_type: "live", "upcoming" or "completed"
            max_results: Page size

        Returns:
            Video ids in search order
        """
        data = await self._get(
            "search",
            {
                "part": "snippet",
                "channelId": channel_id,
                "eventType": event_type,
                "type": "video",
                "maxResults": max_results,
            },
        )

        ids = []
        for it in data.get("items", []):
            video_id = it.get("id", {}).get("videoId")
            if video_id:
                ids.append(video_id)
        return ids

    async def list_videos(self, video_ids: Iterable[str]) -> list[dict[str, Any]]:
        """Fetch full details for a set of videos.

        Ids are sent in comma-joined batches of at most 50. Ids the API does
        not know are silently absent from the result.

        Returns:
            Raw video items with snippet, contentDetails, statistics and
            liveStreamingDetails parts
        """
        ids = list(video_ids)
        items: list[dict[str, Any]] = []

        for start in range(0, len(ids), VIDEOS_BATCH_SIZE):
            batch = ids[start : start + VIDEOS_BATCH_SIZE]
            data = await self._get(
                "videos",
                {
                    "part": "snippet,contentDetails,statistics,liveStreamingDetails",
                    "id": ",".join(batch),
                },
            )
            items.extend(data.get("items", []))

        return items

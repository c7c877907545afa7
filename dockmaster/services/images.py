"""Image operations via the runtime CLI, plus registry search over HTTP."""

import logging
from typing import Any

import httpx

from dockmaster.core.errors import BadRequestError
from dockmaster.schemas.images import ImageLine, ImageRecord, ImageSearchResponse, RegistryResult
from dockmaster.services.executor import CommandError, CommandExecutor
from dockmaster.services.parsing import (
    parse_docker_time,
    parse_json_document,
    parse_json_lines,
    parse_size,
    reject_option_like,
)
from dockmaster.services.translator import JSON_FORMAT, CliTranslator

logger = logging.getLogger(__name__)

DEFAULT_REGISTRY_SEARCH_URL = "https://hub.docker.com/v2/search/repositories/"
REGISTRY_PAGE_SIZE = 25
UNTAGGED = "<none>:<none>"


class RegistrySearchError(Exception):
    """Registry search failed (network error, non-2xx, or unexpected body)."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


def to_image_record(line: ImageLine) -> ImageRecord:
    if line.repository and line.repository != "<none>":
        repo_tags = [f"{line.repository}:{line.tag or 'latest'}"]
    else:
        repo_tags = [UNTAGGED]
    return ImageRecord(
        id=line.id,
        repo_tags=repo_tags,
        created=parse_docker_time(line.created_at),
        size=parse_size(line.size),
    )


class ImageService(CliTranslator):
    kind = "image"

    def __init__(
        self,
        executor: CommandExecutor,
        search_url: str = DEFAULT_REGISTRY_SEARCH_URL,
        timeout: float = 10.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        super().__init__(executor)
        self._search_url = search_url
        self._timeout = timeout
        self._transport = transport

    def list_images(self) -> list[ImageRecord]:
        """One record per repository:tag line; ids repeat for multi-tagged images."""
        output = self._output(["images", "--format", JSON_FORMAT, "--no-trunc"])
        return [to_image_record(line) for line in parse_json_lines(output, ImageLine, self.kind)]

    def search_registry(self, query: str) -> list[RegistryResult]:
        """Query the public registry. Raises RegistrySearchError on any failure."""
        params = {"query": query, "page_size": REGISTRY_PAGE_SIZE}
        try:
            with httpx.Client(timeout=self._timeout, transport=self._transport) as client:
                resp = client.get(self._search_url, params=params)
        except httpx.HTTPError as e:
            raise RegistrySearchError(f"Registry request failed: {e}") from e
        if resp.status_code >= 400:
            raise RegistrySearchError(f"Registry returned HTTP {resp.status_code}")
        try:
            body: dict[str, Any] = resp.json()
        except ValueError as e:
            raise RegistrySearchError("Registry returned invalid JSON") from e
        results = body.get("results") if isinstance(body, dict) else None
        if not isinstance(results, list):
            raise RegistrySearchError("Registry response has no results list")
        hits: list[RegistryResult] = []
        for item in results:
            try:
                hits.append(RegistryResult.model_validate(item))
            except ValueError:
                logger.warning("Skipping malformed registry result", extra={"item": str(item)[:500]})
        return hits

    def search(self, query: str) -> ImageSearchResponse:
        """
        Local images whose repo:tag contains query (case-insensitive) and registry hits.
        Either source failing yields an empty list for that key.
        """
        query = (query or "").strip()
        if not query:
            raise BadRequestError("Query parameter 'q' is required")

        needle = query.lower()
        local: list[ImageRecord] = []
        try:
            local = [
                img
                for img in self.list_images()
                if any(needle in tag.lower() for tag in img.repo_tags)
            ]
        except CommandError as e:
            logger.error("Failed to search local images", extra={"query": query, "error": e.message})

        hub: list[RegistryResult] = []
        try:
            hub = self.search_registry(query)
        except RegistrySearchError as e:
            logger.error("Failed to search registry", extra={"query": query, "error": e.message})

        return ImageSearchResponse(local=local, docker_hub=hub)

    def pull(self, image: str, tag: str | None = None) -> str:
        """Pull image[:tag]; returns the CLI output."""
        reference = reject_option_like(image, "image")
        if tag:
            reference = f"{reference}:{tag}"
        output = self._output(["pull", reference], reference)
        logger.info("Image pulled", extra={"image": reference})
        return output

    def remove(self, image_id: str, force: bool = False) -> None:
        args = ["rmi", "-f"] if force else ["rmi"]
        self._output([*args, reject_option_like(image_id, "image id")], image_id)

    def inspect(self, image_id: str) -> dict[str, Any]:
        reject_option_like(image_id, "image id")
        output = self._output(["image", "inspect", image_id], image_id)
        return parse_json_document(output, self.kind, image_id)

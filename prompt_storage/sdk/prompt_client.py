import logging
import os
import requests
from typing import Any, Dict, List, Optional
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

logger = logging.getLogger(__name__)

# Only failures to reach the server are retried; HTTP error statuses are not
_retry_on_connection_error = retry(
    retry=retry_if_exception_type((requests.exceptions.ConnectionError, requests.exceptions.Timeout)),
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=1, min=1, max=10),
    reraise=True,
)


class PromptClient:
    def __init__(self, base_url: str = "http://localhost:8080", api_key: Optional[str] = None,
                 timeout: float = 30.0):
        """Initialize the prompt storage client"""
        self.base_url = base_url.rstrip('/')
        self.api_key = api_key or os.getenv("PROMPT_STORAGE_API_KEY")
        self.timeout = timeout
        self.session = requests.Session()

        headers = {
            "Content-Type": "application/json",
            "Accept": "application/json"
        }

        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"

        self.session.headers.update(headers)

    @_retry_on_connection_error
    def _request(self, method: str, path: str, **kwargs) -> requests.Response:
        response = self.session.request(
            method, f"{self.base_url}{path}", timeout=self.timeout, **kwargs
        )
        try:
            response.raise_for_status()
        except requests.exceptions.HTTPError as e:
            logger.error(f"{method} {path} failed: {e}")
            raise
        return response

    def create_prompt(self, content: str, name: Optional[str] = None,
                      description: Optional[str] = None, category: Optional[str] = None,
                      tags: Optional[List[str]] = None, parent: Optional[str] = None,
                      branched: Optional[bool] = None) -> str:
        """Create a prompt and return its id"""
        data = {
            "content": content,
            "name": name,
            "description": description,
            "category": category,
            "tags": tags,
            "parent": parent,
            "branched": branched,
        }
        # omitted metadata fields must stay absent so no metadata row is created
        payload = {key: value for key, value in data.items() if value is not None}
        return self._request("POST", "/prompt", json=payload).text

    def update_prompt(self, prompt_id: str, content: str,
                      branched: Optional[bool] = None) -> str:
        """Add a new version to the lineage of ``prompt_id`` and return the new id"""
        payload: Dict[str, Any] = {"id": prompt_id, "content": content}
        if branched is not None:
            payload["branched"] = branched
        return self._request("PUT", "/prompt", json=payload).text

    def get_prompt(self, prompt_id: str, metadata: bool = False) -> Dict[str, Any]:
        """Get a prompt by id"""
        return self._request(
            "GET", f"/prompt/{prompt_id}", params={"metadata": str(metadata).lower()}
        ).json()

    def get_prompt_content(self, prompt_id: str, latest: bool = False) -> str:
        """Get a prompt's content, or the newest content of its lineage"""
        return self._request(
            "GET", f"/prompt/{prompt_id}/content", params={"latest": str(latest).lower()}
        ).json()

    def get_versions(self, prompt_id: str) -> List[Dict[str, Any]]:
        """List every version in a prompt's lineage"""
        return self._request("GET", f"/prompt/{prompt_id}/versions").json()

    def list_prompts(self, category: Optional[str] = None, offset: int = 0,
                     limit: int = 10) -> List[Dict[str, Any]]:
        """List prompts with pagination"""
        params: Dict[str, Any] = {"offset": offset, "limit": limit}
        if category is not None:
            params["category"] = category
        return self._request("GET", "/prompts", params=params).json()

    def get_categories(self) -> List[str]:
        """List distinct prompt categories"""
        return self._request("GET", "/prompt/categories").json()

    def update_metadata(self, prompt_id: str, name: Optional[str] = None,
                        description: Optional[str] = None, category: Optional[str] = None,
                        tags: Optional[List[str]] = None) -> str:
        """Replace a prompt's metadata; omitted fields are cleared"""
        payload = {
            "id": prompt_id,
            "name": name,
            "description": description,
            "category": category,
            "tags": tags,
        }
        return self._request("PUT", "/prompt/metadata", json=payload).text

    def delete_prompt(self, prompt_id: str) -> None:
        """Archive a prompt"""
        self._request("DELETE", f"/prompt/{prompt_id}")

# Example usage
if __name__ == "__main__":
    client = PromptClient()

    try:
        prompt_id = client.create_prompt(
            content="You are a helpful customer support assistant...",
            name="customer_support_assistant",
            category="support",
            tags=["customer_support"]
        )
        print(f"Created prompt: {prompt_id}")

        new_id = client.update_prompt(prompt_id, "You are a concise customer support assistant...")
        print(f"Created new version: {new_id}")

        print(f"Latest content: {client.get_prompt_content(prompt_id, latest=True)}")
        print(f"Available versions: {client.get_versions(prompt_id)}")

    except Exception as e:
        print(f"An error occurred: {e}")

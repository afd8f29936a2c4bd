"""
HTTP client for the Meeting Slot Engine
Talks to a running scheduling service over its /api routes
"""

import requests
from typing import Dict, List, Optional, Tuple


class SchedulingClient:
    def __init__(self, base_url: str = "http://localhost:8080", timeout: float = 10):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def _url(self, path: str) -> str:
        return f"{self.base_url}/api{path}"

    @staticmethod
    def _payload(response: requests.Response):
        if response.status_code == 204 or not response.content:
            return None
        return response.json().get("response")

    def create_user(self, name: str, email: str) -> Dict:
        """Register a participant"""
        try:
            response = requests.post(self._url("/users"), json={"name": name, "email": email}, timeout=self.timeout)
            response.raise_for_status()
            return self._payload(response)
        except requests.exceptions.RequestException as e:
            print(f"Error creating user: {e}")
            return {"error": str(e)}

    def get_users(self) -> Dict:
        try:
            response = requests.get(self._url("/users"), timeout=self.timeout)
            response.raise_for_status()
            return self._payload(response)
        except requests.exceptions.RequestException as e:
            print(f"Error getting users: {e}")
            return {"error": str(e)}

    def get_user(self, user_id: str) -> Dict:
        try:
            response = requests.get(self._url(f"/users/{user_id}"), timeout=self.timeout)
            response.raise_for_status()
            return self._payload(response)
        except requests.exceptions.RequestException as e:
            print(f"Error getting user: {e}")
            return {"error": str(e)}

    def get_availability(self, user_id: str) -> Dict:
        """Fetch a user's availability windows as epoch-second dicts"""
        try:
            response = requests.get(self._url(f"/users/{user_id}/slots"), timeout=self.timeout)
            response.raise_for_status()
            return {"slots": self._payload(response)}
        except requests.exceptions.RequestException as e:
            print(f"Error getting availability: {e}")
            return {"error": str(e)}

    def set_availability(self, user_id: str, windows: List[Tuple[int, int]]) -> Dict:
        """
        Replace a user's availability

        Args:
            user_id: the user's id
            windows: (start, end) pairs of epoch seconds
        """
        body = [{"start_time": start, "end_time": end} for start, end in windows]
        try:
            print(f"[SchedulingClient] POST /users/{user_id}/slots windows={len(body)}")
            response = requests.post(self._url(f"/users/{user_id}/slots"), json=body, timeout=self.timeout)
            response.raise_for_status()
            return {"slots": self._payload(response)}
        except requests.exceptions.RequestException as e:
            print(f"Error setting availability: {e}")
            return {"error": str(e)}

    def clear_availability(self, user_id: str) -> Dict:
        try:
            response = requests.delete(self._url(f"/users/{user_id}/slots"), timeout=self.timeout)
            response.raise_for_status()
            return {"status": "deleted"}
        except requests.exceptions.RequestException as e:
            print(f"Error clearing availability: {e}")
            return {"error": str(e)}

    def create_event(self, title: str, duration_hours: int, organizer_id: str, slots: List[Tuple[int, int]]) -> Dict:
        """Create an event with candidate slots given as (start, end) epoch seconds"""
        try:
            response = requests.post(self._url("/events"), json={
                "title": title,
                "duration_hours": duration_hours,
                "organizer_id": organizer_id,
                "slots": [{"start_time": start, "end_time": end} for start, end in slots],
            }, timeout=self.timeout)
            response.raise_for_status()
            return self._payload(response)
        except requests.exceptions.RequestException as e:
            print(f"Error creating event: {e}")
            return {"error": str(e)}

    def get_event(self, event_id: str) -> Dict:
        try:
            response = requests.get(self._url(f"/events/{event_id}"), timeout=self.timeout)
            response.raise_for_status()
            return self._payload(response)
        except requests.exceptions.RequestException as e:
            print(f"Error getting event: {e}")
            return {"error": str(e)}

    def update_event(self, event_id: str, title: str, duration_hours: int, organizer_id: str,
                     slots: List[Tuple[int, int]]) -> Dict:
        """Replace an event's title, duration and candidate slots"""
        try:
            print(f"[SchedulingClient] PUT /events/{event_id} slots={len(slots)}")
            response = requests.put(self._url(f"/events/{event_id}"), json={
                "title": title,
                "duration_hours": duration_hours,
                "organizer_id": organizer_id,
                "slots": [{"start_time": start, "end_time": end} for start, end in slots],
            }, timeout=self.timeout)
            response.raise_for_status()
            return self._payload(response)
        except requests.exceptions.RequestException as e:
            print(f"Error updating event: {e}")
            return {"error": str(e)}

    def delete_event(self, event_id: str) -> Dict:
        try:
            response = requests.delete(self._url(f"/events/{event_id}"), timeout=self.timeout)
            response.raise_for_status()
            return {"status": "deleted"}
        except requests.exceptions.RequestException as e:
            print(f"Error deleting event: {e}")
            return {"error": str(e)}

    def get_possible_slot(self, event_id: str) -> Optional[Dict]:
        """
        Ask the service for the best-attended slot of an event

        Returns:
            The slot with "users" and "not_working_users", None when the
            service has no usable slot, or an {"error": ...} dict
        """
        try:
            print(f"[SchedulingClient] GET /events/{event_id}/possible-slot")
            response = requests.get(self._url(f"/events/{event_id}/possible-slot"), timeout=self.timeout)
            if response.status_code == 404:
                return None
            response.raise_for_status()
            return self._payload(response)
        except requests.exceptions.RequestException as e:
            print(f"Error getting possible slot: {e}")
            return {"error": str(e)}

    def is_backend_available(self) -> bool:
        """Check if the service is up"""
        try:
            response = requests.get(self._url("/health"), timeout=5)
            return response.status_code == 200
        except requests.exceptions.RequestException:
            return False

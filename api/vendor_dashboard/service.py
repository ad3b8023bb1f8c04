import logging
import random
from typing import Any, Dict, Optional

from api.vendor_dashboard.models import VendorProfileForm
from config import PORTFOLIO_BUCKET
from iwems.exceptions import ValidationFailed
from iwems.loaders import EMPTY_RESULT, InquiryLoader, VendorLoader
from iwems.models import InquiryStatus
from iwems.screens import ScreenController


def portfolio_path(user_id: str, filename: str) -> str:
    """Storage path ``<user id>/<random>.<ext>`` for a new portfolio image."""
    ext = filename.rsplit(".", 1)[-1] if "." in filename else "bin"
    return f"{user_id}/{random.random()}.{ext}"


def storage_path_from_url(image_url: str) -> str:
    """The last two URL segments are the object path inside the bucket."""
    return "/".join(image_url.rstrip("/").split("/")[-2:])


class VendorDashboardScreen(ScreenController):
    screen = "/vendor-dashboard"
    primary_sections = ("vendors", "inquiries")
    load_errors = {
        "vendors": "Failed to fetch vendor profile",
        "inquiries": "Failed to fetch inquiries",
    }

    @property
    def vendor(self) -> Optional[Dict[str, Any]]:
        rows = self.data.get("vendors") or []
        return rows[0] if rows else None

    async def before_load(self):
        return {"vendors": await VendorLoader(self.data_client).for_owner(self.user_id)}

    async def _load_inquiries(self):
        if self.vendor is None:
            return dict(EMPTY_RESULT)
        return await InquiryLoader(self.data_client).for_vendor(self.vendor["id"])

    def loaders(self):
        return {"inquiries": self._load_inquiries}

    def view_data(self):
        data = {k: v for k, v in self.data.items() if k != "vendors"}
        data["vendor"] = self.vendor
        return data

    def _require_vendor(self) -> Dict[str, Any]:
        if self.vendor is None:
            raise ValidationFailed("vendor", "Create your vendor profile first")
        return self.vendor

    async def save_profile(self, form: VendorProfileForm) -> bool:
        record = form.to_record(self.user_id)
        loader = VendorLoader(self.data_client)
        if self.vendor is not None:
            vendor_id = self.vendor["id"]
            return await self.mutate(
                lambda: loader.update(vendor_id, record),
                success_message="Profile updated successfully!",
                failure_message="Failed to update profile",
                form=form.model_dump(mode="json"),
            )
        return await self.mutate(
            lambda: loader.create(record),
            success_message="Profile created successfully!",
            failure_message="Failed to create profile",
            form=form.model_dump(mode="json"),
        )

    async def upload_image(self, filename: str, content: bytes, content_type: str) -> bool:
        vendor = self._require_vendor()
        if not content:
            raise ValidationFailed("file", "Please choose an image to upload")
        path = portfolio_path(self.user_id, filename)
        images = list(vendor.get("portfolio_images") or [])

        async def _upload_and_attach():
            uploaded = await self.data_client.upload(PORTFOLIO_BUCKET, path, content, content_type)
            if uploaded.get("status") != "success":
                return uploaded
            public_url = self.data_client.get_public_url(PORTFOLIO_BUCKET, path)
            return await VendorLoader(self.data_client).set_portfolio(vendor["id"], [*images, public_url])

        return await self.mutate(_upload_and_attach, "Image uploaded successfully!", "Failed to upload image")

    async def remove_image(self, image_url: str) -> bool:
        vendor = self._require_vendor()
        if image_url not in (vendor.get("portfolio_images") or []):
            raise ValidationFailed("image_url", "That image is not in your portfolio")
        images = [img for img in (vendor.get("portfolio_images") or []) if img != image_url]

        async def _detach_and_remove():
            result = await VendorLoader(self.data_client).set_portfolio(vendor["id"], images)
            if result.get("status") != "success":
                return result
            removed = await self.data_client.remove(PORTFOLIO_BUCKET, [storage_path_from_url(image_url)])
            if removed.get("status") != "success":
                # The URL is already gone from the profile; an orphaned object is harmless.
                logging.warning(f"VendorDashboardScreen: storage cleanup failed for {image_url}: {removed.get('error')}")
            return result

        return await self.mutate(_detach_and_remove, "Image removed successfully!", "Failed to remove image")

    async def update_inquiry(self, inquiry_id: str, status: InquiryStatus) -> bool:
        status = InquiryStatus(status)
        return await self.mutate(
            lambda: InquiryLoader(self.data_client).set_status(inquiry_id, status),
            success_message=f"Inquiry {status.value}!",
            failure_message="Failed to update inquiry",
        )

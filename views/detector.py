# views/detector.py

from typing import Optional
from core.errors import FormValidationError
from core.gateway import GatewayClient, SUPPORTED_LANGUAGES
from core.images import prepare_image, to_jpeg
from core.models import DiseaseAnalysis
from .base import FeatureView, ViewState

DEFAULT_TRANSLATION_LANGUAGE = "hi"


class DetectorView(FeatureView):
    """Upload or snap a leaf photo, diagnose it, and translate the report."""

    name = "detector"

    def __init__(self, gateway: GatewayClient):
        super().__init__()
        self.gateway = gateway
        self.image_data: Optional[bytes] = None
        self.mime_type: Optional[str] = None
        self.translation = ViewState()

    @property
    def analysis(self) -> Optional[DiseaseAnalysis]:
        return self.state.result

    def select_image(self, image_data: bytes, mime_type: str, from_camera: bool = False):
        """A new image clears the previous analysis and translation."""
        if from_camera:
            image_data, mime_type = to_jpeg(image_data), "image/jpeg"
        else:
            image_data, mime_type = prepare_image(image_data, mime_type)
        self.image_data, self.mime_type = image_data, mime_type
        self.state.reset()
        self.translation.reset()

    def detect(self) -> bool:
        self.translation.reset()
        return self._run(self._diagnose)

    def _diagnose(self) -> DiseaseAnalysis:
        if not self.image_data:
            raise FormValidationError("Please select an image first.")
        return self.gateway.diagnose_image(self.image_data, self.mime_type)

    @property
    def report_text(self) -> str:
        analysis = self.analysis
        if analysis is None:
            return ""
        treatments = analysis.treatment_recommendations
        return (
            f"Disease: {analysis.disease_name}. "
            f"Description: {analysis.description}. "
            f"Causes: {', '.join(analysis.causes)}. "
            f"Organic Treatments: {', '.join(treatments.organic)}. "
            f"Chemical Treatments: {', '.join(treatments.chemical)}."
        )

    def translate_report(self, language_code: str = DEFAULT_TRANSLATION_LANGUAGE) -> bool:
        return self._run(self._translate, language_code, state=self.translation)

    def _translate(self, language_code: str) -> str:
        if self.analysis is None:
            raise FormValidationError("Run a diagnosis before translating the report.")
        language = SUPPORTED_LANGUAGES.get(language_code, "English")
        return self.gateway.translate(self.report_text, language)

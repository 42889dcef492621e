"""
동작 분석 Service Layer
Stage 컴포넌트들을 조합하여 전체 분석 파이프라인 실행
"""
import asyncio
import logging
import uuid
from datetime import datetime
from typing import Optional

from app.common.errors import AnalysisError
from app.domain.form.analyzer import FormAnalyzer
from app.domain.imagery.synthesizer import (
    ComparisonImageSynthesizer,
    ReferenceImageSynthesizer,
)
from app.domain.movement.identifier import MovementIdentifier
from app.schemas.analysis_dto import (
    AnalysisResult,
    AnalyzeMovementRequest,
    DegradedStage,
    StageOutcome,
)

logger = logging.getLogger(__name__)


class MovementAnalysisService:
    """
    동작 분석 메인 서비스 (Orchestrator)

    책임:
    - Identify → (Reference ∥ Analyze) → Compare → Assemble 순서 보장
    - Stage별 degraded 결과 수집 → 응답의 status / degradedStages
    - 외부 클라이언트 수명 관리 (aclose)
    """

    def __init__(
        self,
        identifier: MovementIdentifier,
        form_analyzer: FormAnalyzer,
        reference_synthesizer: ReferenceImageSynthesizer,
        comparison_synthesizer: ComparisonImageSynthesizer,
        provider: str = "noop",
        parallel_stages: bool = True,
        clients: tuple = (),
    ):
        """
        Args:
            identifier: 동작 식별기
            form_analyzer: 폼 분석기
            reference_synthesizer: 레퍼런스 이미지 생성기
            comparison_synthesizer: 비교 이미지 생성기
            provider: 응답에 표시할 LLM 제공자
            parallel_stages: 레퍼런스 이미지/폼 분석 동시 실행 여부
            clients: aclose() 대상 외부 클라이언트
        """
        self.identifier = identifier
        self.form_analyzer = form_analyzer
        self.reference_synthesizer = reference_synthesizer
        self.comparison_synthesizer = comparison_synthesizer
        self.provider = provider
        self.parallel_stages = parallel_stages
        self._clients = clients

    async def analyze(self, request: AnalyzeMovementRequest) -> AnalysisResult:
        """
        동작 분석 파이프라인 실행

        Process:
        1. 동작 식별
        2. 레퍼런스 이미지 생성 ∥ 폼 분석
        3. 비교 이미지 생성
        4. 결과 조립

        Raises:
            AnalysisError: Stage 밖에서 발생한 예상치 못한 오류
        """
        analysis_id = self._generate_analysis_id()
        logger.info(f"🔄 동작 분석 시작: {analysis_id} (frames={request.frame_source})")

        try:
            # ========== Step 1: 동작 식별 ==========
            identified = await self.identifier.identify(
                request.identification_frame, request.movement_hint
            )
            movement = identified.value.movement

            # ========== Step 2: 레퍼런스 이미지 ∥ 폼 분석 ==========
            if self.parallel_stages:
                reference, assessed = await asyncio.gather(
                    self.reference_synthesizer.synthesize(movement),
                    self.form_analyzer.analyze(movement, request.analysis_frame),
                )
            else:
                reference = await self.reference_synthesizer.synthesize(movement)
                assessed = await self.form_analyzer.analyze(movement, request.analysis_frame)

            # ========== Step 3: 비교 이미지 ==========
            issues = [cp.issue for cp in assessed.value.correction_points]
            comparison = await self.comparison_synthesizer.synthesize(movement, issues)

            # ========== Step 4: 결과 조립 ==========
            result = self._assemble(
                analysis_id, request, identified, assessed, reference, comparison
            )
        except Exception as e:
            logger.error(f"❌ 분석 실패: {analysis_id}: {e}", exc_info=True)
            raise AnalysisError(str(e) or type(e).__name__) from e

        logger.info(
            f"✅ 동작 분석 완료: {analysis_id} ({result.movement}, "
            f"score={result.score:.1f}, status={result.status})"
        )
        return result

    def _assemble(
        self,
        analysis_id: str,
        request: AnalyzeMovementRequest,
        identified: StageOutcome,
        assessed: StageOutcome,
        reference: StageOutcome,
        comparison: StageOutcome,
    ) -> AnalysisResult:
        degraded = list(request.upstream_degraded)
        degraded += [
            DegradedStage(stage=o.stage, reason=o.reason or "unknown")
            for o in (identified, reference, assessed, comparison)
            if o.degraded
        ]
        profile = identified.value
        assessment = assessed.value

        return AnalysisResult(
            analysis_id=analysis_id,
            movement=profile.movement,
            key_points=profile.key_points,
            common_errors=profile.common_errors,
            feedback=assessment.feedback,
            correction_points=assessment.correction_points,
            score=assessment.score,
            severity=assessment.severity,
            reference_image_url=reference.value,
            comparison_image_url=comparison.value,
            status="degraded" if degraded else "ok",
            degraded_stages=degraded,
            frame_source=request.frame_source,
            provider=self.provider,
        )

    async def aclose(self) -> None:
        for client in self._clients:
            try:
                await client.aclose()
            except Exception as e:
                logger.warning(f"⚠️ 클라이언트 종료 실패: {e}")

    def _generate_analysis_id(self) -> str:
        """분석 ID 생성 (timestamp + UUID)"""
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        unique_id = str(uuid.uuid4())[:8]
        return f"movement_{timestamp}_{unique_id}"


def build_request(
    frames,
    movement_hint: Optional[str] = None,
    upstream_degraded: Optional[list] = None,
) -> AnalyzeMovementRequest:
    """FramePair → Service 요청 DTO"""
    return AnalyzeMovementRequest(
        identification_frame=frames.identification_frame,
        analysis_frame=frames.analysis_frame,
        frame_source=frames.source,
        movement_hint=movement_hint,
        upstream_degraded=upstream_degraded or [],
    )

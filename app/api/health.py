from fastapi import APIRouter, HTTPException
from app.config.settings import settings
from app.llm.providers.openai_runtime import get_openai_adapter

router = APIRouter(tags=["Health"])


@router.get("/health")
def health_check():
    return {
        "status": "ok",
        "service": "movement-analyzer",
        "provider": settings.LLM_PROVIDER,
        "frame_source": settings.FRAME_SOURCE,
        "demo_assets": settings.DEMO_MOVEMENT_FRAME.is_file()
        and settings.DEMO_FORM_FRAME.is_file(),
    }


@router.get('/openai/health')
async def llm_health(model: str = "gpt-4o-mini"):
    if settings.LLM_PROVIDER == "noop":
        return {"ok": True, "provider": "noop", "model": None, "echo": None}

    adapter = None
    try:
        adapter = get_openai_adapter(settings.OPENAI_API_KEY)
        text = await adapter.chat(
            model=model,
            messages=[{"role": "user", "content": "ping"}],
            temperature=0.0,
            max_tokens=8,
            timeout=30.0,
        )
        return {"ok": True, "provider": "openai", "model": model, "echo": text}

    except Exception as e:
        # 예외를 그대로 노출(임시)
        raise HTTPException(status_code=500, detail=f"{type(e).__name__}: {e}")

    finally:
        if adapter is not None:
            await adapter.aclose()


ROUTERS = [router]

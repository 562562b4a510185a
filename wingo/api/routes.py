from fastapi import APIRouter, Depends, HTTPException, Header, Request
from sqlmodel import Session
from wingo.db.base import get_session
from wingo.api.schemas import PredictOut, StatsOut, WeightOut, HistoryOut, TrainOut, RefreshOut
from wingo.core.errors import WingoError
from wingo.services import PredictionService
from wingo.config import settings

router = APIRouter()


def _auth(api_key_header: str | None = Header(default=None, alias="X-API-Key")):
    if settings.api_key and api_key_header != settings.api_key:
        raise HTTPException(status_code=401, detail="Invalid API key")


def get_service(request: Request) -> PredictionService:
    return request.app.state.service


@router.get('/predict', response_model=PredictOut)
def predict(refresh: bool = True, session: Session = Depends(get_session),
            svc: PredictionService = Depends(get_service), ok=Depends(_auth)):
    if refresh:
        svc.refresh(session)
    try:
        return svc.predict(session).to_dict()
    except WingoError as e:
        raise HTTPException(503, detail=str(e))


@router.get('/stats', response_model=StatsOut)
def stats(svc: PredictionService = Depends(get_service)):
    return svc.stats()


@router.get('/weights', response_model=dict[str, WeightOut])
def weights(svc: PredictionService = Depends(get_service)):
    return svc.weights()


@router.get('/history', response_model=HistoryOut)
def history(limit: int = 50, svc: PredictionService = Depends(get_service)):
    return {'items': svc.history(limit)}


@router.post('/train', response_model=TrainOut)
def train(svc: PredictionService = Depends(get_service), ok=Depends(_auth)):
    return {'trained': svc.train()}


@router.post('/refresh', response_model=RefreshOut)
def refresh(session: Session = Depends(get_session), svc: PredictionService = Depends(get_service),
            ok=Depends(_auth)):
    added = svc.refresh(session)
    return {'added': added, 'buffer_size': len(svc.ctx.buffer)}

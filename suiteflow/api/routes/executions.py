from datetime import datetime
from typing import Annotated

from dishka import FromDishka
from dishka.integrations.fastapi import DishkaRoute
from fastapi import APIRouter, Header, Path, Query

from suiteflow.domain.execution import HistoryQuery, StepResult
from suiteflow.schemas_pydantic.execution import (
    CompleteExecutionRequest,
    ExecutionHistoryResponse,
    ExecutionResponse,
    ExecutionResultsResponse,
    ExecutionStatusResponse,
    StepResultSchema,
    SuiteExecutionResultsResponse,
    TriggerRequest,
    TriggerResponse,
)
from suiteflow.services.execution_service import ExecutionService
from suiteflow.services.history_service import ExecutionHistoryService
from suiteflow.services.suite_aggregation import SuiteAggregationService

router = APIRouter(prefix="/executions", tags=["executions"], route_class=DishkaRoute)


@router.post("/trigger", response_model=TriggerResponse, response_model_exclude_none=True)
async def trigger_execution(
    request: TriggerRequest,
    execution_service: FromDishka[ExecutionService],
    x_user_id: Annotated[str, Header(description="Authenticated principal")],
) -> TriggerResponse:
    result = await execution_service.trigger(
        triggered_by=x_user_id,
        test_case_id=request.test_case_id,
        test_suite_id=request.test_suite_id,
        environment=request.environment,
        browser_version=request.browser_version,
    )
    return TriggerResponse.model_validate(result)


@router.get("/history", response_model=ExecutionHistoryResponse)
async def get_execution_history(
    history_service: FromDishka[ExecutionHistoryService],
    project_id: Annotated[str | None, Query(alias="projectId")] = None,
    test_case_id: Annotated[str | None, Query(alias="testCaseId")] = None,
    test_suite_id: Annotated[str | None, Query(alias="testSuiteId")] = None,
    suite_execution_id: Annotated[str | None, Query(alias="suiteExecutionId")] = None,
    start_date: Annotated[datetime | None, Query(alias="startDate")] = None,
    end_date: Annotated[datetime | None, Query(alias="endDate")] = None,
    limit: Annotated[int | None, Query()] = None,
    cursor: Annotated[str | None, Query()] = None,
) -> ExecutionHistoryResponse:
    page = await history_service.query_history(
        HistoryQuery(
            project_id=project_id,
            test_case_id=test_case_id,
            test_suite_id=test_suite_id,
            suite_execution_id=suite_execution_id,
            start_date=start_date,
            end_date=end_date,
            limit=limit,
            cursor=cursor,
        )
    )
    return ExecutionHistoryResponse(
        executions=[ExecutionResponse.model_validate(e) for e in page.executions],
        next_cursor=page.next_cursor,
        count=page.count,
    )


@router.get("/suites/{suite_execution_id}", response_model=SuiteExecutionResultsResponse)
async def get_suite_results(
    suite_execution_id: Annotated[str, Path()],
    aggregation_service: FromDishka[SuiteAggregationService],
) -> SuiteExecutionResultsResponse:
    aggregate = await aggregation_service.get_suite_results(suite_execution_id)
    return SuiteExecutionResultsResponse.model_validate(aggregate)


@router.get("/{execution_id}/status", response_model=ExecutionStatusResponse)
async def get_execution_status(
    execution_id: Annotated[str, Path()],
    execution_service: FromDishka[ExecutionService],
) -> ExecutionStatusResponse:
    view = await execution_service.get_status(execution_id)
    return ExecutionStatusResponse.model_validate(view)


@router.get("/{execution_id}/results", response_model=ExecutionResultsResponse)
async def get_execution_results(
    execution_id: Annotated[str, Path()],
    execution_service: FromDishka[ExecutionService],
) -> ExecutionResultsResponse:
    results = await execution_service.get_results(execution_id)
    return ExecutionResultsResponse.model_validate(results)


@router.post("/{execution_id}/start", response_model=ExecutionResponse)
async def start_execution(
    execution_id: Annotated[str, Path()],
    execution_service: FromDishka[ExecutionService],
) -> ExecutionResponse:
    execution = await execution_service.start_execution(execution_id)
    return ExecutionResponse.model_validate(execution)


@router.post("/{execution_id}/steps", response_model=ExecutionResponse)
async def record_step(
    execution_id: Annotated[str, Path()],
    step: StepResultSchema,
    execution_service: FromDishka[ExecutionService],
) -> ExecutionResponse:
    execution = await execution_service.record_step(execution_id, StepResult(**step.model_dump()))
    return ExecutionResponse.model_validate(execution)


@router.post("/{execution_id}/complete", response_model=ExecutionResponse)
async def complete_execution(
    execution_id: Annotated[str, Path()],
    request: CompleteExecutionRequest,
    execution_service: FromDishka[ExecutionService],
) -> ExecutionResponse:
    execution = await execution_service.complete_execution(
        execution_id,
        status=request.status,
        result=request.result,
        error_message=request.error_message,
        end_time=request.end_time,
    )
    return ExecutionResponse.model_validate(execution)

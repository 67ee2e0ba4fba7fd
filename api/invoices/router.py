"""
Dashboard pages and invoice form actions.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from fastapi.responses import HTMLResponse

from auth import dependencies as auth_dependencies
from core.cache import prerender
from core.templates import templates

from . import schemas, service

router = APIRouter(dependencies=[Depends(auth_dependencies.get_current_user)])


def _page_cache(request: Request):
    return request.app.state.page_cache


async def _render_invoice_list(
    request: Request,
    *,
    query: str,
    page: int,
    state: schemas.ActionState | None = None,
) -> HTMLResponse:
    invoices = await service.fetch_filtered_invoices(query, page=page)
    total_pages = await service.fetch_invoices_pages(query)
    return templates.TemplateResponse(
        request,
        "invoices/list.html",
        {
            "invoices": invoices,
            "query": query,
            "page": page,
            "total_pages": total_pages,
            "state": state or schemas.ActionState(),
        },
    )


async def _render_form(
    request: Request,
    template: str,
    *,
    state: schemas.ActionState,
    invoice: dict | None = None,
) -> HTMLResponse:
    customers = await service.fetch_customers()
    return templates.TemplateResponse(
        request,
        template,
        {"customers": customers, "invoice": invoice, "state": state},
    )


@router.get("/dashboard", response_class=HTMLResponse)
async def dashboard(request: Request) -> HTMLResponse:
    cards = await service.fetch_card_data()
    return templates.TemplateResponse(request, "dashboard.html", {"cards": cards})


@router.get("/dashboard/invoices", response_class=HTMLResponse)
@prerender(experimental_ppr=True, vary=("query", "page"))
async def invoices_page(
    request: Request,
    query: str = Query(default="", max_length=200),
    page: int = Query(default=1, ge=1),
) -> HTMLResponse:
    return await _render_invoice_list(request, query=query, page=page)


@router.get("/dashboard/invoices/create", response_class=HTMLResponse)
async def create_invoice_page(request: Request) -> HTMLResponse:
    return await _render_form(request, "invoices/create.html", state=schemas.ActionState())


@router.post("/dashboard/invoices/create", response_class=HTMLResponse)
async def create_invoice(request: Request) -> HTMLResponse:
    form = await request.form()
    # Success never returns here: the action ends with a redirect.
    state = await service.create_invoice(form, cache=_page_cache(request))
    return await _render_form(request, "invoices/create.html", state=state)


@router.get("/dashboard/invoices/{invoice_id}/edit", response_class=HTMLResponse)
async def edit_invoice_page(request: Request, invoice_id: str) -> HTMLResponse:
    invoice = await service.fetch_invoice_by_id(invoice_id)
    if invoice is None:
        raise HTTPException(status_code=404, detail="Invoice not found.")
    return await _render_form(request, "invoices/edit.html", state=schemas.ActionState(), invoice=invoice)


@router.post("/dashboard/invoices/{invoice_id}/edit", response_class=HTMLResponse)
async def update_invoice(request: Request, invoice_id: str) -> HTMLResponse:
    form = await request.form()
    state = await service.update_invoice(invoice_id, form, cache=_page_cache(request))
    invoice = {
        "id": invoice_id,
        "customer_id": str(form.get("customerId") or ""),
        "amount": str(form.get("amount") or ""),
        "status": str(form.get("status") or ""),
    }
    return await _render_form(request, "invoices/edit.html", state=state, invoice=invoice)


@router.post("/dashboard/invoices/{invoice_id}/delete", response_class=HTMLResponse)
async def delete_invoice(request: Request, invoice_id: str) -> HTMLResponse:
    state = await service.delete_invoice(invoice_id, cache=_page_cache(request))
    return await _render_invoice_list(request, query="", page=1, state=state)

import datetime
import logging
from typing import List, Tuple, Dict, Any

from reportlab.lib.pagesizes import landscape, letter
from reportlab.lib.units import inch
from sqlalchemy.orm import Session

from sales_portal.config import COMPANY_NAME
from sales_portal.constants import ALL_LEAD_STATUSES, PERM_REPORTS_READ
from sales_portal.core.access_guard import RouteRequirement, evaluate_access
from sales_portal.core.identity import Identity
from sales_portal.data import crud_leads
from sales_portal.utils.pdf_generator import PDFGenerator

logger = logging.getLogger("sales_portal")


class ReportService:
    def get_lead_pipeline_report_data(self, db: Session, identity: Identity) -> List[Dict[str, Any]]:
        """
        Lead counts per sales staff member and status, busiest owner first.

        Raises:
            AccessDeniedError: If the identity lacks the reports permission.
            FetchError: If leads cannot be loaded.
        """
        evaluate_access(identity, RouteRequirement.of(permissions=[PERM_REPORTS_READ])).raise_for_denial()
        rows: Dict[str, Dict[str, Any]] = {}
        for lead in crud_leads.get_leads(db):
            row = rows.setdefault(lead.sales_staff_id, {
                "sales_staff_id": lead.sales_staff_id,
                "sales_staff_name": lead.sales_staff_name,
                "counts": {status: 0 for status in ALL_LEAD_STATUSES},
                "total": 0,
            })
            if lead.status in row["counts"]:
                row["counts"][lead.status] += 1
            row["total"] += 1
        return sorted(rows.values(), key=lambda r: (-r["total"], r["sales_staff_name"]))

    def get_lead_detail_report_data(self, db: Session, identity: Identity) -> List[Dict[str, Any]]:
        evaluate_access(identity, RouteRequirement.of(permissions=[PERM_REPORTS_READ])).raise_for_denial()
        return [
            {
                "optician_name": lead.optician_name,
                "contact_person_name": lead.contact_person_name,
                "phone_number": lead.phone_number,
                "status": lead.status,
                "priority": lead.priority,
                "sales_staff_name": lead.sales_staff_name,
                "total_visits": lead.total_visits,
                "created_at": lead.created_at,
            }
            for lead in crud_leads.get_leads(db)
        ]

    def generate_lead_pipeline_pdf(
            self,
            pipeline_data: List[Dict[str, Any]],
            detail_data: List[Dict[str, Any]],
            generated_by: str,
            pdf_save_path: str,
    ) -> Tuple[bool, str]:
        filter_criteria_text = f"Generated {datetime.datetime.now().strftime('%Y-%m-%d %H:%M')} by {generated_by}"
        try:
            pdf_gen = PDFGenerator(str(pdf_save_path), page_size=landscape(letter), company_name=COMPANY_NAME)
            pdf_gen.add_title("Lead Pipeline Report"); pdf_gen.add_filter_info(filter_criteria_text)
            pdf_gen.add_section_title("Leads by Sales Staff and Status"); pdf_gen.add_spacer(6)

            page_width, _ = landscape(letter); available_width = page_width - 1.0 * inch
            status_width = available_width * 0.7 / len(ALL_LEAD_STATUSES)
            col_widths = [available_width * 0.2] + [status_width] * len(ALL_LEAD_STATUSES) + [available_width * 0.1]
            pdf_gen.generate_pipeline_table(pipeline_data, list(ALL_LEAD_STATUSES), col_widths)
            pdf_gen.add_spacer(18)

            detail_widths = [available_width * pc for pc in [0.20, 0.15, 0.13, 0.10, 0.08, 0.16, 0.07, 0.11]]
            pdf_gen.generate_leads_detail_table(detail_data, detail_widths)

            pdf_gen.build_pdf()
            logger.info(f"Lead pipeline report written to {pdf_save_path}.")
            return True, str(pdf_save_path)
        except Exception as e:
            logger.error(f"Error generating Lead Pipeline PDF: {e}", exc_info=True)
            return False, f"Failed to generate PDF: {e}"

import datetime
import logging
from typing import List, Dict, Any, Optional

from reportlab.lib import colors
from reportlab.lib.enums import TA_LEFT, TA_CENTER, TA_RIGHT
from reportlab.lib.pagesizes import letter
from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle
from reportlab.lib.units import inch
from reportlab.pdfgen import canvas
from reportlab.platypus import (
    SimpleDocTemplate, Paragraph, Spacer, Table, TableStyle, KeepTogether
)

logger = logging.getLogger("sales_portal")


class PDFGenerator:
    def __init__(self, file_path: str, page_size=letter, company_name="Your Company"):
        self.file_path = file_path
        self.page_size = page_size
        self.story = []
        self.company_name = company_name
        self.setup_styles()

    def setup_styles(self):
        self.styles = getSampleStyleSheet()
        base_font = 'Helvetica'; bold_font = 'Helvetica-Bold'

        self.styles.add(ParagraphStyle(name='ReportTitle', fontName=bold_font, fontSize=20, leading=24, alignment=TA_CENTER, spaceAfter=20, textColor=colors.darkblue))
        self.styles.add(ParagraphStyle(name='FilterInfo', fontName=base_font, fontSize=10, leading=12, alignment=TA_CENTER, spaceBefore=6, spaceAfter=12, textColor=colors.darkgrey))
        self.styles.add(ParagraphStyle(name='SectionTitle', fontName=bold_font, fontSize=12, leading=14, spaceBefore=6, spaceAfter=6, textColor=colors.darkblue))
        self.styles.add(ParagraphStyle(name='TableHeader', fontName=bold_font, fontSize=8, leading=10, alignment=TA_CENTER, textColor=colors.whitesmoke))
        self.styles.add(ParagraphStyle(name='TableCell', fontName=base_font, fontSize=8, leading=10, alignment=TA_LEFT))
        self.styles.add(ParagraphStyle(name='TableCellRight', fontName=base_font, fontSize=8, leading=10, alignment=TA_RIGHT))
        self.styles.add(ParagraphStyle(name='SummaryTotal', fontName=bold_font, fontSize=8.5, leading=11, alignment=TA_RIGHT, textColor=colors.darkblue))

    def build_pdf(self):
        left_margin = right_margin = 0.5 * inch
        top_margin = bottom_margin = 0.5 * inch
        doc_title = self.story[0].text if self.story and isinstance(self.story[0], Paragraph) else "Report"
        doc_title_safe = "".join(c if c.isalnum() else "_" for c in doc_title)
        doc = SimpleDocTemplate(
            self.file_path, pagesize=self.page_size, leftMargin=left_margin, rightMargin=right_margin,
            topMargin=top_margin, bottomMargin=bottom_margin,
            title=f"{doc_title_safe} - {datetime.datetime.now().strftime('%Y-%m-%d')}", author=self.company_name )
        try: doc.build(self.story)
        except Exception as e:
            logger.warning(f"Error occurred during PDF building, writing fallback page: {e}")
            c = canvas.Canvas(self.file_path, pagesize=self.page_size)
            c.setFont("Helvetica-Bold", 16); c.drawString(left_margin, self.page_size[1] - top_margin - 20, f"Report - {datetime.datetime.now().strftime('%Y-%m-%d')}")
            c.line(left_margin, self.page_size[1] - top_margin - 30, self.page_size[0] - right_margin, self.page_size[1] - top_margin - 30)
            c.setFont("Helvetica", 10); c.drawString(left_margin, self.page_size[1] - top_margin - 50, "PDF generation error occurred.")
            c.drawString(left_margin, self.page_size[1] - top_margin - 65, f"Details: {e}"); c.save()

    def add_title(self, title_text: str): self.story.append(Paragraph(title_text, self.styles['ReportTitle']))
    def add_section_title(self, title_text: str): self.story.append(Paragraph(title_text, self.styles['SectionTitle']))
    def add_filter_info(self, filter_text: str): self.story.append(Paragraph(filter_text, self.styles['FilterInfo']))
    def add_spacer(self, height_points: int = 12): self.story.append(Spacer(1, height_points))

    def _default_widths(self, num_columns: int) -> List[float]:
        page_w, _ = self.page_size; avail_w = page_w - 1*inch
        return [avail_w / num_columns if num_columns > 0 else 1*inch] * num_columns

    def generate_pipeline_table(self, data: List[Dict[str, Any]], statuses: List[str], column_widths: Optional[List[float]] = None):
        """One row per sales staff member with a count per status and a row total, plus a totals row."""
        if not data: self.story.append(Paragraph("No leads found.", self.styles['FilterInfo'])); return
        column_headers = ["Sales Staff"] + [s.capitalize() for s in statuses] + ["Total"]
        table_data = [[Paragraph(h, self.styles['TableHeader']) for h in column_headers]]

        column_totals = {status: 0 for status in statuses}
        grand_total = 0
        for item in data:
            counts = item.get('counts', {})
            row = [Paragraph(str(item.get('sales_staff_name', '')), self.styles['TableCell'])]
            for status in statuses:
                row.append(Paragraph(str(counts.get(status, 0)), self.styles['TableCellRight']))
                column_totals[status] += counts.get(status, 0)
            row.append(Paragraph(str(item.get('total', 0)), self.styles['TableCellRight']))
            grand_total += item.get('total', 0)
            table_data.append(row)

        totals_row = [Paragraph("<b>Totals:</b>", self.styles['SummaryTotal'])]
        totals_row.extend(Paragraph(f"<b>{column_totals[s]}</b>", self.styles['SummaryTotal']) for s in statuses)
        totals_row.append(Paragraph(f"<b>{grand_total}</b>", self.styles['SummaryTotal']))
        table_data.append(totals_row)

        if not column_widths or len(column_widths) != len(column_headers):
            column_widths = self._default_widths(len(column_headers))

        table = Table(table_data, colWidths=column_widths, repeatRows=1)
        style = TableStyle([ ('BACKGROUND', (0,0), (-1,0), colors.darkslateblue), ('TEXTCOLOR',(0,0),(-1,0),colors.whitesmoke),
                             ('FONTNAME', (0,0), (-1,0), 'Helvetica-Bold'), ('ALIGN', (0,0), (-1,0), 'CENTER'),
                             ('GRID', (0,0), (-1,-1), 0.5, colors.grey), ('LINEBELOW', (0,0), (-1,0), 1, colors.darkblue),
                             ('ROWBACKGROUNDS', (0,1), (-1,-2), [colors.aliceblue, colors.lavender]), ('VALIGN', (0,0), (-1,-1), 'MIDDLE'),
                             ('BACKGROUND', (0,-1), (-1,-1), colors.lightgrey), ('LINEABOVE', (0,-1), (-1,-1), 1, colors.darkblue), ])
        for i in range(1, len(column_headers)):
            style.add('ALIGN', (i,1), (i,-1), 'RIGHT')

        table.setStyle(style); self.story.append(KeepTogether(table))

    def generate_leads_detail_table(self, data: List[Dict[str, Any]], column_widths: Optional[List[float]] = None):
        if not data: return
        self.story.append(Paragraph("Lead Details", self.styles['SectionTitle'])); self.add_spacer(6)
        column_headers = ["Optician", "Contact", "Phone", "Status", "Priority", "Owner", "Visits", "Created"]
        table_data = [[Paragraph(h, self.styles['TableHeader']) for h in column_headers]]
        for item in data:
            created = item.get('created_at').strftime('%Y-%m-%d') if item.get('created_at') else 'N/A'
            row = [ Paragraph(str(item.get('optician_name', '')), self.styles['TableCell']),
                    Paragraph(str(item.get('contact_person_name', '')), self.styles['TableCell']),
                    Paragraph(str(item.get('phone_number', '')), self.styles['TableCell']),
                    Paragraph(str(item.get('status', '')).capitalize(), self.styles['TableCell']),
                    Paragraph(str(item.get('priority', '')).capitalize(), self.styles['TableCell']),
                    Paragraph(str(item.get('sales_staff_name', '')), self.styles['TableCell']),
                    Paragraph(str(item.get('total_visits', 0)), self.styles['TableCellRight']),
                    Paragraph(created, self.styles['TableCell']), ]
            table_data.append(row)

        if not column_widths or len(column_widths) != len(column_headers):
            column_widths = self._default_widths(len(column_headers))
        table = Table(table_data, colWidths=column_widths, repeatRows=1)
        style = TableStyle([('BACKGROUND',(0,0),(-1,0),colors.cornflowerblue),('TEXTCOLOR',(0,0),(-1,0),colors.whitesmoke),('FONTNAME',(0,0),(-1,0),'Helvetica-Bold'),('ALIGN',(0,0),(-1,0),'CENTER'),('GRID',(0,0),(-1,-1),0.5,colors.grey),('LINEBELOW',(0,0),(-1,0),1,colors.darkblue),('ROWBACKGROUNDS',(0,1),(-1,-1),[colors.whitesmoke,colors.lightgrey]),('VALIGN',(0,0),(-1,-1),'MIDDLE')])
        table.setStyle(style); self.story.append(table)

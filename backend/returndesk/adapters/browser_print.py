from returndesk.utils.log import get_logger

log = get_logger("print")

PRINT_HOOK = """
<script>
  window.onload = function() {
    window.print();
    window.onafterprint = function() {
      window.close();
    };
  };
</script>
"""


class BrowserPrintAdapter:
    """
    Hands a rendered document to the browser's print facility.
    submit() returns the document wired to open the print dialog as soon as it
    loads and to close its window once printing finishes or is cancelled.
    """

    def submit(self, html: str) -> str:
        log.info("print job submitted (%d bytes)", len(html))
        marker = "</body>"
        idx = html.rfind(marker)
        if idx == -1:
            return html + PRINT_HOOK
        return html[:idx] + PRINT_HOOK + html[idx:]

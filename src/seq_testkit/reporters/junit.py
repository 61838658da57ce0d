from typing import Iterable
from .results import SuiteResult
import xml.etree.ElementTree as ET


class JUnitReporter:
    def __init__(self, path: str): self.path = path

    def build(self, results: Iterable[SuiteResult]) -> ET.Element:
        root = ET.Element("testsuites")
        for result in results:
            testsuite = ET.SubElement(root, "testsuite", name=result.suite, tests=str(len(result.cases)),
                                      failures=str(result.failed), skipped=str(result.skipped))
            if result.status != "PASS" and result.logs:
                ET.SubElement(testsuite, "system-err").text = "\n".join(result.logs)
            for c in result.cases:
                tc = ET.SubElement(testsuite, "testcase", classname=result.suite, name=c.id)
                if c.failed:
                    failure = ET.SubElement(tc, "failure", message="failed")
                    failure.text = "\n".join(c.logs)
                elif c.skipped:
                    ET.SubElement(tc, "skipped", message=c.logs[0] if c.logs else "skipped")
        return root

    def emit(self, results: Iterable[SuiteResult]) -> None:
        ET.ElementTree(self.build(results)).write(self.path, encoding="utf-8", xml_declaration=True)

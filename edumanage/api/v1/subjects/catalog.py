"""Static subject catalog: program code -> semester -> subjects. Read-only lookup data."""

from typing import Dict, List, NamedTuple


class CatalogSubject(NamedTuple):
    code: str
    name: str


_CSE: Dict[int, List[CatalogSubject]] = {
    1: [
        CatalogSubject("CH102BS", "Engineering Chemistry"),
        CatalogSubject("CH103BS", "Programming for Problem Solving"),
        CatalogSubject("CH107BS", "Engineering Chemistry Laboratory"),
        CatalogSubject("CS106ES", "Elements of Computer Science & Engineering"),
        CatalogSubject("CS108ES", "Programming for Problem Solving Laboratory"),
        CatalogSubject("EE104ES", "Basic Electrical Engineering"),
        CatalogSubject("EE109ES", "Basic Electrical Engineering Laboratory"),
        CatalogSubject("MA101BS", "Matrices and Calculus"),
        CatalogSubject("ME105ES", "Computer Aided Engineering Graphics"),
    ],
    2: [
        CatalogSubject("CS206ES", "Python Programming Laboratory"),
        CatalogSubject("CS208ES", "IT Workshop"),
        CatalogSubject("EC205ES", "Electronic Devices and Circuits"),
        CatalogSubject("EN208HS", "English Language and Communication Skills Laboratory"),
        CatalogSubject("MA201BS", "Ordinary Differential Equations and Vector Calculus"),
        CatalogSubject("ME203ES", "Engineering Workshop"),
        CatalogSubject("PH202BS", "Applied Physics"),
        CatalogSubject("PH207BS", "Applied Physics Laboratory"),
    ],
    3: [
        CatalogSubject("CS301ESD", "Digital Electronics"),
        CatalogSubject("CS302PC", "Data Structures"),
        CatalogSubject("CS304PC", "Computer Organization and Architecture"),
        CatalogSubject("CS305PC", "Object Oriented Programming through Java"),
        CatalogSubject("CS306PC", "Data Structures Lab"),
        CatalogSubject("CS309PC", "Java Lab"),
        CatalogSubject("CS410SD", "Data Visualization - R Programming / Power BI"),
        CatalogSubject("MA303BS", "Computer Oriented Statistical Methods"),
    ],
    4: [
        CatalogSubject("CS320SD", "Real-time Research Project / Societal Related Project"),
        CatalogSubject("CS401PC", "Discrete Mathematics"),
        CatalogSubject("CS403PC", "Operating System"),
        CatalogSubject("CS404PC", "Computer Organization and Architecture"),
        CatalogSubject("CS405PC", "Software Engineering"),
        CatalogSubject("CS407PC", "Database Management Systems Lab"),
        CatalogSubject("EN106HS", "Operating Systems Lab"),
        CatalogSubject("SM402MS", "Business Economics & Financial Analysis"),
    ],
    5: [
        CatalogSubject("CS503PC", "Computer Networks Lab"),
        CatalogSubject("CS701PC", "Design and Analysis of Algorithms"),
        CatalogSubject("CS702PC", "Computer Networks"),
        CatalogSubject("CS721PE", "DevOps"),
        CatalogSubject("CS722PE", "DevOps Lab"),
        CatalogSubject("CS754PE", "Blockchain Technology"),
        CatalogSubject("CS755PE", "Software Process & Project Management"),
        CatalogSubject("EN708HS", "Advanced English Communication Skills Lab"),
    ],
    6: [
        CatalogSubject("CS601PC", "Machine Learning"),
        CatalogSubject("CS602PC", "Formal Languages & Automata Theory"),
        CatalogSubject("CS603PC", "Artificial Intelligence"),
        CatalogSubject("CS604PC", "Machine Learning Lab"),
        CatalogSubject("CS605PC", "Artificial Intelligence Lab"),
        CatalogSubject("CS606PC", "Industrial Oriented Mini Project"),
        CatalogSubject("CS612OE", "Database Management Systems"),
        CatalogSubject("CS635P", "Software Testing Methodologies"),
    ],
    7: [
        CatalogSubject("CS634PE", "Mobile Application Development"),
        CatalogSubject("CS702PC", "Advanced DBMS / Blockchain Technology"),
        CatalogSubject("CS705PC", "Minor Project"),
        CatalogSubject("CS7123", "Seminar / Internship"),
        CatalogSubject("CS802PC", "Compiler Design"),
        CatalogSubject("CS832OE", "Introduction to Computer Networks"),
    ],
    8: [
        CatalogSubject("CS306123", "Comprehensive Viva"),
        CatalogSubject("CS742PE", "Cyber Security"),
        CatalogSubject("CS801PC", "Project / Thesis"),
        CatalogSubject("CS831OE", "Algorithm Design & Analysis"),
        CatalogSubject("CS863PE", "Deep Learning"),
    ],
}

SUBJECT_CATALOG: Dict[str, Dict[int, List[CatalogSubject]]] = {
    "CSE": _CSE,
}


def subjects_for(program_code: str, semester: int) -> List[CatalogSubject]:
    """Empty list for an unknown program or semester."""
    return list(SUBJECT_CATALOG.get((program_code or "").strip().upper(), {}).get(semester, []))

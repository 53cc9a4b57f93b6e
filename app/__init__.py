# Flask presentation layer for the PDF digest summarizer

import uvicorn

from answer_analyzer.config import HOST, PORT, DEBUG

if __name__ == "__main__":
    uvicorn.run("answer_analyzer.main:app", host=HOST, port=PORT, reload=DEBUG)
